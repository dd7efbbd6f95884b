"""Digest recipes used to sign outbound requests and verify notifications.

Every provider signs a fixed, ordered selection of field values together with
a shared secret. The security of the scheme rests on the secret alone, so the
only job here is to reproduce each provider's concatenation byte for byte:
field order, separator, where the secret goes, and the case of the hex output.

Two shapes cover the providers in this package:

* a plain digest of ``value1 + sep + value2 + ... + secret`` (the position of
  the secret is marked with :data:`SECRET` in the recipe), and
* an HMAC keyed with the secret over the joined values.
"""

import base64
import hashlib
import hmac
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Union


class DigestAlgorithm(str, Enum):
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @property
    def constructor(self) -> Callable:
        return getattr(hashlib, self.value)


class _SecretPlaceholder:
    def __repr__(self) -> str:
        return "SECRET"


SECRET = _SecretPlaceholder()
"""Marks the position of the shared secret inside a recipe's field list."""


def _stringify(value: Any) -> str:
    return "" if value is None else str(value)


def _encode(digest: bytes, encoding: str, uppercase: bool) -> str:
    if encoding == "base64":
        return base64.b64encode(digest).decode("ascii")
    if encoding != "hex":
        raise ValueError(f"Unsupported signature encoding: {encoding}")
    text = digest.hex()
    return text.upper() if uppercase else text


def hexdigest(message: str, algorithm: DigestAlgorithm, uppercase: bool = False) -> str:
    """Hash ``message`` (UTF-8) and return the hex digest."""
    digest = algorithm.constructor(message.encode("utf-8")).digest()
    return _encode(digest, "hex", uppercase)


def hmac_digest(
    message: str,
    key: str,
    algorithm: DigestAlgorithm,
    encoding: str = "hex",
    uppercase: bool = False,
) -> str:
    """Return the HMAC of ``message`` keyed with ``key``."""
    digest = hmac.new(
        key.encode("utf-8"), message.encode("utf-8"), algorithm.constructor
    ).digest()
    return _encode(digest, encoding, uppercase)


def compute(
    ordered_values: Iterable[Any],
    secret: Optional[str],
    algorithm: Union[DigestAlgorithm, str],
    *,
    separator: str = "",
    uppercase: bool = False,
) -> str:
    """Digest ``ordered_values`` followed by ``secret``.

    Args:
        ordered_values: Field values in the provider's fixed order
        secret: Shared secret appended after the values (skipped if None)
        algorithm: Hash algorithm
        separator: String placed between each value and before the secret
        uppercase: Return upper-case hex

    Returns:
        Hex digest string
    """
    values = [_stringify(value) for value in ordered_values]
    if secret is not None:
        values.append(secret)
    return hexdigest(separator.join(values), DigestAlgorithm(algorithm), uppercase)


@dataclass(frozen=True)
class SignatureRecipe:
    """One provider's signing recipe.

    ``fields`` lists wire field names in concatenation order; :data:`SECRET`
    marks where the (optionally transformed) secret is spliced in. With
    ``keyed`` set the secret is the HMAC key instead and must not appear in
    ``fields``.
    """

    fields: Sequence[Union[str, _SecretPlaceholder]]
    algorithm: DigestAlgorithm
    separator: str = ""
    uppercase: bool = False
    keyed: bool = False
    encoding: str = "hex"
    secret_transform: Optional[Callable[[str], str]] = None
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        if self.keyed and SECRET in self.fields:
            raise ValueError("A keyed recipe cannot place the secret in its fields")

    def field_names(self, fields: Mapping[str, Any]) -> List[Union[str, _SecretPlaceholder]]:
        return list(self.fields)

    def values(self, fields: Mapping[str, Any], secret: str) -> List[str]:
        if self.secret_transform is not None:
            secret = self.secret_transform(secret)
        return [
            secret if name is SECRET else _stringify(fields.get(name))
            for name in self.field_names(fields)
        ]

    def message(self, fields: Mapping[str, Any], secret: str) -> str:
        """Return the string that gets hashed."""
        return self.separator.join(self.values(fields, secret))

    def sign(self, fields: Mapping[str, Any], secret: str) -> str:
        message = self.message(fields, secret)
        if self.keyed:
            return hmac_digest(message, secret, self.algorithm, self.encoding, self.uppercase)
        digest = self.algorithm.constructor(message.encode("utf-8")).digest()
        return _encode(digest, self.encoding, self.uppercase)

    def verify(self, fields: Mapping[str, Any], secret: str, delivered: Optional[str]) -> bool:
        if not delivered:
            return False
        expected = self.sign(fields, secret)
        if self.encoding == "hex" and not self.case_sensitive:
            return expected.lower() == delivered.strip().lower()
        return expected == delivered.strip()


@dataclass(frozen=True)
class SignedFieldNamesRecipe(SignatureRecipe):
    """Recipe whose field list travels in the payload itself.

    The payload names the signed fields in ``signed_field_names`` (comma
    separated); the message is ``name=value`` pairs joined with commas.
    """

    fields: Sequence[str] = ()
    algorithm: DigestAlgorithm = DigestAlgorithm.SHA256
    separator: str = ","
    keyed: bool = True
    encoding: str = "base64"
    names_field: str = "signed_field_names"

    def field_names(self, fields: Mapping[str, Any]) -> List[str]:
        names = _stringify(fields.get(self.names_field))
        return [name for name in names.split(",") if name]

    def values(self, fields: Mapping[str, Any], secret: str) -> List[str]:
        return [f"{name}={_stringify(fields.get(name))}" for name in self.field_names(fields)]
