#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Display formatting shared by the runners."""

from __future__ import annotations

import math

_SUFFIXES = ["", "K", "M", "B", "T", "Qa", "Qi", "Sx", "Sp", "Oc", "No", "Dc"]


def format_currency(amount: float, currency: str = "$") -> str:
    if not math.isfinite(amount):
        return f"{currency}∞"
    sign = "-" if amount < 0 else ""
    value = abs(float(amount))
    tier = 0
    while value >= 1000 and tier < len(_SUFFIXES) - 1:
        value /= 1000.0
        tier += 1
    if round(value, 2) >= 1000 and tier < len(_SUFFIXES) - 1:
        value /= 1000.0
        tier += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{sign}{currency}{text}{_SUFFIXES[tier]}"


def format_time(seconds: float) -> str:
    total = math.ceil(seconds)
    if total < 60:
        return f"{total}s"
    minutes, rest = divmod(total, 60)
    if minutes < 60:
        return f"{minutes}m {rest}s"
    hours = minutes // 60
    return f"{hours}h {minutes % 60}m"
