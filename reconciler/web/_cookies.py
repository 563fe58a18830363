"""
Cookie-backed cart reference store — one per request.
"""

from __future__ import annotations

from collections.abc import Mapping

from fastapi import Response
from kungfu import Result, Ok

from reconciler.errors import StoreError


class CookieCartStore:
    """
    Reads come from the request cookies; writes and deletes are buffered and
    applied to the response as Set-Cookie headers.

    Satisfies ``CartReferenceStore``.
    """

    __slots__ = ("_values", "_writes", "_max_age", "_secure")

    def __init__(
        self,
        cookies: Mapping[str, str],
        *,
        max_age: int = 7 * 24 * 3600,
        secure: bool = False,
    ) -> None:
        self._values = dict(cookies)
        self._writes: dict[str, str | None] = {}
        self._max_age = max_age
        self._secure = secure

    async def get(self, key: str) -> Result[str | None, StoreError]:
        return Ok(self._values.get(key) or None)

    async def set(self, key: str, value: str) -> Result[None, StoreError]:
        self._values[key] = value
        self._writes[key] = value
        return Ok(None)

    async def delete(self, key: str) -> Result[bool, StoreError]:
        existed = self._values.pop(key, None) is not None
        if existed:
            self._writes[key] = None
        return Ok(existed)

    def apply(self, response: Response) -> Response:
        for key, value in self._writes.items():
            if value is None:
                response.delete_cookie(key, path="/")
            else:
                response.set_cookie(
                    key,
                    value,
                    max_age=self._max_age,
                    path="/",
                    httponly=True,
                    samesite="lax",
                    secure=self._secure,
                )
        return response


__all__ = ("CookieCartStore",)
