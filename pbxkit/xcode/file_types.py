# File type classification.
#
# Maps a file extension to the Xcode file type written into PBXFileReference
# and to the build phase the file belongs in.

from enum import Enum
from typing import Dict, NamedTuple, Optional

from pbxkit.details.paths import get_extension


class BuildCategory(Enum):
    SOURCE = "source"
    HEADER = "header"
    RESOURCE = "resource"
    FRAMEWORK = "framework"
    COPY_FILES = "copy_files"
    NOT_BUILDABLE = "not_buildable"


class FileType(Enum):
    C = "sourcecode.c.c"
    CPP = "sourcecode.cpp.cpp"
    C_HEADER = "sourcecode.c.h"
    CPP_HEADER = "sourcecode.cpp.h"
    SWIFT = "sourcecode.swift"
    OBJC = "sourcecode.c.objc"
    OBJCPP = "sourcecode.cpp.objcpp"
    ASM = "sourcecode.asm"
    XIB = "file.xib"
    NIB = "wrapper.nib"
    STORYBOARD = "file.storyboard"
    PLIST = "text.plist.xml"
    XCCONFIG = "text.xcconfig"
    STRINGS = "text.plist.strings"
    JSON = "text.json"
    RTF = "text.rtf"
    PNG = "image.png"
    TIFF = "image.tiff"
    ICNS = "image.icns"
    ASSET_CATALOG = "folder.assetcatalog"
    FRAMEWORK = "wrapper.framework"
    BUNDLE = "wrapper.plug-in"
    APP = "wrapper.application"
    APP_EXTENSION = "wrapper.app-extension"
    PROJECT = "wrapper.pb-project"
    DYLIB = "compiled.mach-o.dylib"
    TBD = "sourcecode.text-based-dylib-definition"
    ARCHIVE = "archive.ar"
    EXECUTABLE = "compiled.mach-o.executable"
    TEXT = "text"
    FOLDER = "folder"

    @property
    def is_text(self) -> bool:
        return self.value.startswith(("sourcecode.", "text"))


class FileTypeInfo(NamedTuple):
    file_type: FileType
    category: BuildCategory
    # Products are written with explicitFileType instead of lastKnownFileType
    explicit: bool = False


_EXTENSIONS: Dict[str, FileTypeInfo] = {
    "a": FileTypeInfo(FileType.ARCHIVE, BuildCategory.FRAMEWORK),
    "app": FileTypeInfo(FileType.APP, BuildCategory.NOT_BUILDABLE, explicit=True),
    "appex": FileTypeInfo(FileType.APP_EXTENSION, BuildCategory.COPY_FILES, explicit=True),
    "s": FileTypeInfo(FileType.ASM, BuildCategory.SOURCE),
    "c": FileTypeInfo(FileType.C, BuildCategory.SOURCE),
    "cc": FileTypeInfo(FileType.CPP, BuildCategory.SOURCE),
    "cpp": FileTypeInfo(FileType.CPP, BuildCategory.SOURCE),
    "m": FileTypeInfo(FileType.OBJC, BuildCategory.SOURCE),
    "mm": FileTypeInfo(FileType.OBJCPP, BuildCategory.SOURCE),
    "swift": FileTypeInfo(FileType.SWIFT, BuildCategory.SOURCE),
    "h": FileTypeInfo(FileType.C_HEADER, BuildCategory.HEADER),
    "hpp": FileTypeInfo(FileType.CPP_HEADER, BuildCategory.HEADER),
    "pch": FileTypeInfo(FileType.C_HEADER, BuildCategory.HEADER),
    "framework": FileTypeInfo(FileType.FRAMEWORK, BuildCategory.FRAMEWORK),
    "dylib": FileTypeInfo(FileType.DYLIB, BuildCategory.FRAMEWORK),
    "tbd": FileTypeInfo(FileType.TBD, BuildCategory.FRAMEWORK),
    "xcassets": FileTypeInfo(FileType.ASSET_CATALOG, BuildCategory.RESOURCE),
    "plist": FileTypeInfo(FileType.PLIST, BuildCategory.RESOURCE),
    "png": FileTypeInfo(FileType.PNG, BuildCategory.RESOURCE),
    "json": FileTypeInfo(FileType.JSON, BuildCategory.RESOURCE),
    "strings": FileTypeInfo(FileType.STRINGS, BuildCategory.RESOURCE),
    "storyboard": FileTypeInfo(FileType.STORYBOARD, BuildCategory.RESOURCE),
    "xib": FileTypeInfo(FileType.XIB, BuildCategory.RESOURCE),
    "nib": FileTypeInfo(FileType.NIB, BuildCategory.RESOURCE),
    "txt": FileTypeInfo(FileType.TEXT, BuildCategory.RESOURCE),
    "rtf": FileTypeInfo(FileType.RTF, BuildCategory.RESOURCE),
    "tiff": FileTypeInfo(FileType.TIFF, BuildCategory.RESOURCE),
    "icns": FileTypeInfo(FileType.ICNS, BuildCategory.RESOURCE),
    "bundle": FileTypeInfo(FileType.BUNDLE, BuildCategory.RESOURCE),
    "xcconfig": FileTypeInfo(FileType.XCCONFIG, BuildCategory.NOT_BUILDABLE),
    "xcodeproj": FileTypeInfo(FileType.PROJECT, BuildCategory.NOT_BUILDABLE),
    "dll": FileTypeInfo(FileType.TEXT, BuildCategory.NOT_BUILDABLE),
    "inc": FileTypeInfo(FileType.TEXT, BuildCategory.NOT_BUILDABLE),
}

_UNKNOWN = FileTypeInfo(FileType.TEXT, BuildCategory.RESOURCE)
_FOLDER = FileTypeInfo(FileType.FOLDER, BuildCategory.RESOURCE)


def file_type_info(path: str, is_folder: bool = False) -> FileTypeInfo:
    """
    Classify a file by its extension.

    Args:
        path: File name or path; only the extension is looked at.
        is_folder: Folder references are always copied as resources.

    Returns:
        The file type and build category. Unknown extensions are resources.
    """
    if is_folder:
        return _FOLDER
    return _EXTENSIONS.get(get_extension(path).lstrip("."), _UNKNOWN)


def category_for_file_type(file_type: Optional[str]) -> BuildCategory:
    """Category for a file type string already stored in the document."""
    if file_type == FileType.FOLDER.value:
        return BuildCategory.RESOURCE
    for info in _EXTENSIONS.values():
        if info.file_type.value == file_type:
            return info.category
    return BuildCategory.RESOURCE
