import hashlib
import logging
import secrets
from typing import Optional

from bingo.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from bingo.db.models.base import utcnow
from bingo.db.models.credentials import PlayerCredential
from bingo.db.models.games import PLAYERS
from bingo.db.repositories.credentials import PlayerCredentialRepository
from bingo.features.sharing.schemas import PlayerSessionOut, SharingStatusOut
from bingo.security.tokens import JWTSettings, create_player_token

logger = logging.getLogger(__name__)

PIN_MIN_LENGTH = 4
PIN_MAX_LENGTH = 8

# comparé quand le slot n'a pas de PIN, pour que les deux échecs coûtent pareil
_DUMMY_PIN = "\x00" * PIN_MAX_LENGTH


def _digest(value: str) -> bytes:
    """Empreinte de longueur fixe : compare_digest ne dépend plus de la longueur du PIN."""
    return hashlib.sha256(value.encode("utf-8")).digest()


class SharingService:
    """
    Porte de partage entre les deux slots.

    - PIN par slot, défini une seule fois (setup), puis utilisé pour se connecter ;
    - drapeau `shared` : l'autre slot peut-il lire ma progression / mes secrets ?
    - relu en base à chaque requête (aucun cache), le partenaire voit le changement tout de suite.
    """

    def __init__(self, *, credential_repo: PlayerCredentialRepository, jwt_settings: JWTSettings):
        self.credentials = credential_repo
        self.jwt = jwt_settings

    # --------------- Helpers ---------------

    @staticmethod
    def _check_player(player: str) -> None:
        if player not in PLAYERS:
            raise ValidationError(f"player must be one of {PLAYERS}")

    def _session_out(self, record: PlayerCredential) -> PlayerSessionOut:
        return PlayerSessionOut(
            player=record.player,
            shared=record.shared,
            player_token=create_player_token(player=record.player, settings=self.jwt),
            expires_in=int(self.jwt.player_ttl.total_seconds()),
        )

    # --------------- Queries ---------------

    def status(self, player: str) -> SharingStatusOut:
        self._check_player(player)
        record = self.credentials.get_by_player(player)
        return SharingStatusOut(has_credential=record is not None, shared=bool(record and record.shared))

    def can_read(self, owner: str, viewer: Optional[str]) -> bool:
        """Un slot lit toujours ses propres données ; l'autre slot seulement si `shared`."""
        if viewer is not None and viewer == owner:
            return True
        record = self.credentials.get_by_player(owner)
        return bool(record and record.shared)

    def ensure_can_read(self, owner: str, viewer: Optional[str]) -> None:
        if not self.can_read(owner, viewer):
            raise ForbiddenError("NOT_SHARED")

    # --------------- Commands ---------------

    def set_credential(self, player: str, pin: str) -> PlayerSessionOut:
        self._check_player(player)
        if not PIN_MIN_LENGTH <= len(pin) <= PIN_MAX_LENGTH:
            raise ValidationError(f"PIN must be {PIN_MIN_LENGTH}-{PIN_MAX_LENGTH} characters")

        if self.credentials.get_by_player(player):
            # jamais d'écrasement : il faut se connecter avec le PIN existant
            raise ConflictError("PIN_ALREADY_SET")

        record = self.credentials.create(player=player, pin=pin, shared=False)
        logger.info("PIN set for player slot %s", player)
        return self._session_out(record)

    def authenticate(self, player: str, pin: str) -> PlayerSessionOut:
        """
        Lève NotFoundError (pas de PIN) ou UnauthorizedError (PIN faux).
        La route renvoie la même 401 dans les deux cas.
        """
        self._check_player(player)
        record = self.credentials.get_by_player(player)
        expected = record.pin if record else _DUMMY_PIN
        matches = secrets.compare_digest(_digest(pin), _digest(expected))

        if record is None:
            logger.warning("Login attempt for slot %s without PIN", player)
            raise NotFoundError("NO_PIN_FOR_PLAYER")
        if not matches:
            logger.warning("Wrong PIN for slot %s", player)
            raise UnauthorizedError("WRONG_PIN")
        return self._session_out(record)

    def set_shared(self, player: str, shared: bool) -> PlayerCredential:
        self._check_player(player)
        record = self.credentials.get_by_player(player)
        if not record:
            raise NotFoundError("PLAYER_NOT_FOUND")
        if record.shared == shared:
            return record
        record = self.credentials.update(record, shared=shared, updated_at=utcnow())
        logger.info("Player slot %s sharing -> %s", player, shared)
        return record
