import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TypedDict

from jose import jwt, JWTError

# ==========================================================
# 🔧 Configuration : paramètres de génération/validation JWT
# ==========================================================

@dataclass(frozen=True)
class JWTSettings:
    """
    Configuration des tokens JWT.

    - `secret` : clé secrète pour signer/valider les tokens
    - `issuer` : émetteur (utilisé dans le payload)
    - `algorithm` : algo de signature (HS256 recommandé)
    - `access_ttl` : durée de vie d’un token d'identité (owner / partner)
    - `player_ttl` : durée de vie d’un token de slot (him / her) après login PIN
    """
    secret: str
    issuer: str = "dare-bingo"
    algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(minutes=60)
    player_ttl: timedelta = timedelta(hours=72)


# ==========================================================
# 🧱 Types
# ==========================================================

class DecodedToken(TypedDict, total=False):
    iss: str
    sub: str            # identité externe (typ=access) ou slot (typ=player)
    typ: str            # "access" | "player"
    jti: str
    iat: int
    exp: int


# ==========================================================
# 🧩 Fonctions utilitaires
# ==========================================================

def _now() -> datetime:
    """Renvoie l'heure UTC actuelle."""
    return datetime.now(timezone.utc)

def new_jti() -> str:
    """Crée un identifiant unique pour un token."""
    return str(uuid.uuid4())


def _encode(*, sub: str, typ: str, ttl: timedelta, settings: JWTSettings) -> str:
    now = _now()
    payload: DecodedToken = {
        "iss": settings.issuer,
        "sub": sub,
        "typ": typ,
        "jti": new_jti(),
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, settings.secret, algorithm=settings.algorithm)


# ==========================================================
# 🎟️ Génération des tokens
# ==========================================================

def create_access_token(*, identity: str, settings: JWTSettings) -> str:
    """
    Token d'identité. En prod il est émis par le fournisseur OIDC en amont ;
    ici on le signe nous-mêmes (dev, tests, scripts).
    """
    return _encode(sub=identity, typ="access", ttl=settings.access_ttl, settings=settings)


def create_player_token(*, player: str, settings: JWTSettings) -> str:
    """
    Token de slot ("him" / "her") remis après /auth/setup ou /auth/login.
    Prouve quel slot fait la requête (lecture de ses propres données, toggles).
    """
    return _encode(sub=player, typ="player", ttl=settings.player_ttl, settings=settings)


# ==========================================================
# 🔍 Décodage / Validation
# ==========================================================

def decode_token(token: str, settings: JWTSettings) -> DecodedToken:
    """
    Décode et valide un token JWT (signature + expiration + émetteur).
    Lève JWTError en cas de signature invalide ou expirée.
    """
    decoded = jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        issuer=settings.issuer,
        options={"verify_aud": False},
    )
    return decoded  # type: ignore[return-value]


def read_subject(token: str, *, expected_typ: str, settings: JWTSettings) -> str:
    """
    Retourne le `sub` d'un token du type attendu.
    Lève JWTError si le token est invalide ou d'un autre type.
    """
    decoded = decode_token(token, settings)
    if decoded.get("typ") != expected_typ or not decoded.get("sub"):
        raise JWTError("Invalid token type")
    return decoded["sub"]
