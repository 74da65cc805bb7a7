from typing import Iterator, List, Set, Tuple, Union

StrOrIterable = Union[str, List[str], Set[str], Tuple[str, ...]]


# Make scalar string or container of strings iterable, keeping first-seen order
# and dropping repeated owners...
def str_iter(strings: StrOrIterable) -> Iterator[str]:
    if isinstance(strings, (list, set, tuple)):
        seen: Set[str] = set()
        for v in strings:
            if not isinstance(v, str):
                raise TypeError(f"expected str, got {type(v).__name__}")
            if v not in seen:
                seen.add(v)
                yield v
    elif isinstance(strings, str):
        yield strings
    else:
        raise TypeError(f"expected str or collection, got {type(strings).__name__}")

