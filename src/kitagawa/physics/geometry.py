"""
Well geometry helpers.
"""

from __future__ import annotations

import numpy as np

from kitagawa.validation.input_validators import check_physical_parameters


def sensing_volume(Rc: float, Lc: float, Rs: float, Ls: float) -> float:
    """
    Fluid volume of the water-sensing interval of a borehole.

    The interval is a grouted casing section of radius Rc and length Lc above
    a screened section of radius Rs and length Ls:

        Vw = pi * (Rc^2 * Lc + Rs^2 * Ls)

    Parameters
    ----------
    Rc, Lc : float
        Casing radius and length, m.
    Rs, Ls : float
        Screen radius and length, m.

    Returns
    -------
    float
        Volume in m^3.

    Examples
    --------
    >>> round(sensing_volume(0.0508, 146.9, 0.1524, 9.14), 3)  # PBO B084
    1.858
    """
    p = check_physical_parameters(Rc=Rc, Lc=Lc, Rs=Rs, Ls=Ls)
    return float(np.pi * (p["Rc"] ** 2 * p["Lc"] + p["Rs"] ** 2 * p["Ls"]))
