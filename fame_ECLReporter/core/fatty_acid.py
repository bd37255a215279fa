# fame_ECLReporter/core/fatty_acid.py
from __future__ import annotations
import re
from enum import Enum

from .model import FattyAcid

# relative atomic masses of carbon-12, hydrogen-1, oxygen-16
C = 12.0
H = 1.00782503223
O = 15.99491461957


class Form(str, Enum):
    RCO = "RCO"            # acylium
    RCOO = "RCOO"          # carboxylate anion
    RCOOH = "RCOOH"        # free acid
    RCOOCH3 = "RCOOCH3"    # methyl ester

# (carbon, hydrogen, oxygen) offsets relative to the free acid
_FORM_OFFSETS: dict[Form, tuple[int, int, int]] = {
    Form.RCO: (0, -1, -1),
    Form.RCOO: (0, -1, 0),
    Form.RCOOH: (0, 0, 0),
    Form.RCOOCH3: (1, 2, 0),
}


def carbons(fa: FattyAcid) -> int:
    return fa.carbons


def unsaturation(fa: FattyAcid) -> int:
    return fa.unsaturation


def is_saturated(fa: FattyAcid) -> bool:
    return unsaturation(fa) == 0


def hydrogens(fa: FattyAcid) -> int:
    """Hydrogen count of the free acid."""
    return 2 * carbons(fa) - 2 * unsaturation(fa)


def ecn(fa: FattyAcid) -> int:
    """Equivalent carbon number, ``ECN = CN - 2DB``."""
    return carbons(fa) - 2 * unsaturation(fa)


def mass(fa: FattyAcid, form: Form | str = Form.RCOOH) -> float:
    dc, dh, do = _FORM_OFFSETS[Form(form)]
    return (carbons(fa) + dc) * C + (hydrogens(fa) + dh) * H + (2 + do) * O


def masses(fa: FattyAcid) -> dict[Form, float]:
    return {form: mass(fa, form) for form in Form}


# ---------- notation ----------
_FA_RE = re.compile(r"^\s*C?(?P<c>\d+)\s*:\s*(?P<u>\d+)\s*(?:-\s*(?P<pos>[0-9ctCT,\s]+))?\s*$")
_POS_RE = re.compile(r"^(?P<i>\d+)(?P<iso>[ctCT]?)$")


def parse_fatty_acid(text: str, label: str = "") -> FattyAcid:
    """
    Parse the ``C:U-Pc,Pt`` notation, e.g. ``16:0``, ``18:1-9c``, ``18:2-9c,12c``.
    Trans positions are stored negative. Raises ValueError on malformed text or
    when the declared unsaturation does not match the listed positions.
    """
    m = _FA_RE.match(str(text))
    if m is None:
        raise ValueError(f"not a fatty acid: {text!r}")
    count = int(m.group("u"))
    indices: list[int] = []
    if m.group("pos"):
        for token in m.group("pos").split(","):
            token = token.strip()
            if not token:
                continue
            pm = _POS_RE.match(token)
            if pm is None:
                raise ValueError(f"bad double-bond position {token!r} in {text!r}")
            i = int(pm.group("i"))
            indices.append(-i if pm.group("iso").lower() == "t" else i)
    if indices and len(indices) != count:
        raise ValueError(f"{text!r}: {count} double bonds declared, {len(indices)} positions listed")
    if not indices and count:
        # positions unknown; keep the count with unspecified (zero) positions
        indices = [0] * count
    carbons_ = int(m.group("c"))
    if carbons_ > 255:
        raise ValueError(f"{text!r}: carbon count out of range")
    return FattyAcid(carbons=carbons_, indices=tuple(indices), label=label)
