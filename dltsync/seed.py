from __future__ import annotations

from typing import Tuple

from .types import DrawRecord

# Last-resort history used when neither the bundled dataset nor the store
# yields any records.
SEED_HISTORY: Tuple[DrawRecord, ...] = (
    DrawRecord(id="24030", date="2024-03-18", front=(3, 11, 20, 28, 33), back=(4, 9)),
    DrawRecord(id="24029", date="2024-03-16", front=(6, 14, 17, 25, 31), back=(2, 11)),
    DrawRecord(id="24028", date="2024-03-13", front=(1, 9, 22, 27, 34), back=(6, 8)),
    DrawRecord(id="24027", date="2024-03-11", front=(5, 12, 18, 24, 30), back=(1, 10)),
    DrawRecord(id="24026", date="2024-03-09", front=(2, 15, 19, 29, 35), back=(3, 7)),
)
