"""Authentication token model.

A token is an opaque string-to-string mapping handed out by the token
source endpoint. Only one value matters to the client: the ``token``
entry, sent as the ``cc_auth_token`` credential.
"""

from typing import Dict, Iterator, Optional

from pydantic import RootModel, ValidationError

from ..exceptions import TokenError

TOKEN_KEY = "token"


class Token(RootModel[Dict[str, str]]):
    """Opaque token returned by the token source URL.

    .. example::
       >>> token = Token({"token": "1234567890"})
       >>> token.key
       '1234567890'
    """

    root: Dict[str, str]

    def __getitem__(self, item: str) -> str:
        return self.root[item]

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __contains__(self, item: object) -> bool:
        return item in self.root

    def get(self, item: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value for ``item`` or ``default``."""
        return self.root.get(item, default)

    @property
    def key(self) -> str:
        """Get the credential sent in the Authorization header.

        :return: Token key, or an empty string if the token has none
        :rtype: str
        """
        return self.root.get(TOKEN_KEY, "")

    @classmethod
    def from_response(cls, body: bytes) -> "Token":
        """Parse the JSON body returned by the token source URL.

        :param body: Raw response body
        :type body: bytes
        :return: Parsed token
        :rtype: Token
        :raises TokenError: If the body is not a JSON object of strings
        """
        try:
            return cls.model_validate_json(body)
        except ValidationError as e:
            raise TokenError(f"Invalid token payload: {e.error_count()} error(s)") from e
