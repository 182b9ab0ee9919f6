"""
Deterministic unique-name allocation.

One tracker instance covers one naming scope: the shared namespace of
top-level messages and enums, or the field names of a single message/struct.
"""

from __future__ import annotations


class NameTracker:
    """Allocates collision-free names in call order.

    The first request for a candidate returns it unchanged. Later requests for
    the same candidate return candidate_2, candidate_3, ... using a counter per
    candidate that only ever increases. Names that were already issued are
    never issued twice, so a literal request for "User_2" after "User_2" was
    generated yields "User_2_2". The suffix sequence can therefore skip
    numbers: after a literal "User_2", the second request for "User" returns
    "User_3".
    """

    def __init__(self):
        self._counts: dict[str, int] = {}
        self._issued: set[str] = set()

    def unique_name(self, candidate: str) -> str:
        count = self._counts.get(candidate, 0)
        if count == 0 and candidate not in self._issued:
            name = candidate
            count = 1
        else:
            count = max(count, 1)
            while True:
                count += 1
                name = f"{candidate}_{count}"
                if name not in self._issued:
                    break

        self._counts[candidate] = count
        self._issued.add(name)
        return name

    def is_issued(self, name: str) -> bool:
        return name in self._issued

    def __len__(self) -> int:
        return len(self._issued)
