from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from .errors import ShotgridBuilderConsumedError
from .models import ReturnOnly

if TYPE_CHECKING:
    from .session import Session


class RequestBuilder:
    """
    Base for the fluent request builders.

    Configuration methods mutate the builder and return it so calls can be
    chained. The terminal call (`execute`, `send`) may run once; a second run
    raises ShotgridBuilderConsumedError before touching the network.
    """

    def __init__(self, session: "Session"):
        self._session = session
        self._consumed = False

    def _consume(self) -> None:
        if self._consumed:
            raise ShotgridBuilderConsumedError(
                f"{type(self).__name__} has already been executed."
            )
        self._consumed = True


def options_params(
    return_only: Optional[ReturnOnly], include_archived_projects: Optional[bool]
) -> Dict[str, Any]:
    """Query params for the `options[...]` family; unset options are omitted."""
    params: Dict[str, Any] = {}
    if return_only is not None:
        params["options[return_only]"] = ReturnOnly(return_only).value
    if include_archived_projects is not None:
        params["options[include_archived_projects]"] = (
            "true" if include_archived_projects else "false"
        )
    return params
