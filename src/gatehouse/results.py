"""Outcomes a strategy reports back to its host.

A strategy never raises to signal the outcome of an authentication attempt;
it returns one of the frozen dataclasses below and the host integration
turns it into a response:

* :class:`Redirect` -- send the user agent to ``location`` and stop.
* :class:`Success` -- the request is authenticated as ``user``.
* :class:`Failure` -- authentication was denied with ``message``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Literal, Union


@dataclass(frozen=True)
class Redirect:
    location: str

    kind: ClassVar[Literal["redirect"]] = "redirect"


@dataclass(frozen=True)
class Success:
    user: Any

    kind: ClassVar[Literal["success"]] = "success"


@dataclass(frozen=True)
class Failure:
    message: str

    kind: ClassVar[Literal["failure"]] = "failure"


StrategyResult = Union[Redirect, Success, Failure]
