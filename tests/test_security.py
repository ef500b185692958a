from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from nexedu.config import DEV_SECRET_KEY, settings
from nexedu.domain.entities import AuthenticatedIdentity, Role
from nexedu.domain.errors import VerificationError, VerificationFailure
from nexedu.infrastructure.security import PasswordHasher, TokenService, ensure_signing_key

SECRET = "unit-test-secret"


@pytest.fixture
def tokens():
    return TokenService(SECRET)


@pytest.mark.parametrize("identity", [
    AuthenticatedIdentity(id=1, login="ana1", role=Role.PROFESSOR),
    AuthenticatedIdentity(id=42, login="aluno.joão", role=Role.ALUNO),
])
def test_issue_then_verify_returns_same_identity(tokens, identity):
    assert tokens.verify(tokens.issue(identity)) == identity


def test_token_carries_expected_claims(tokens):
    identity = AuthenticatedIdentity(id=7, login="prof", role=Role.PROFESSOR)
    now = datetime.now(timezone.utc)
    claims = jwt.decode(tokens.issue(identity, now=now), SECRET, algorithms=["HS256"])
    assert claims["id"] == 7
    assert claims["login"] == "prof"
    assert claims["role"] == "PROFESSOR"
    assert claims["exp"] - claims["iat"] == 24 * 3600


def test_expired_token_fails_with_expired(tokens):
    identity = AuthenticatedIdentity(id=1, login="ana1", role=Role.PROFESSOR)
    issued = datetime.now(timezone.utc) - timedelta(hours=25)
    with pytest.raises(VerificationError) as exc:
        tokens.verify(tokens.issue(identity, now=issued))
    assert exc.value.kind == VerificationFailure.EXPIRED


def test_token_still_valid_just_before_expiry(tokens):
    identity = AuthenticatedIdentity(id=1, login="ana1", role=Role.ALUNO)
    issued = datetime.now(timezone.utc) - timedelta(hours=23, minutes=59)
    assert tokens.verify(tokens.issue(identity, now=issued)) == identity


def test_token_signed_with_other_key_fails(tokens):
    identity = AuthenticatedIdentity(id=1, login="ana1", role=Role.PROFESSOR)
    foreign = TokenService("another-secret").issue(identity)
    with pytest.raises(VerificationError) as exc:
        tokens.verify(foreign)
    assert exc.value.kind == VerificationFailure.BAD_SIGNATURE


def test_tampered_payload_fails_signature(tokens):
    token = tokens.issue(AuthenticatedIdentity(id=2, login="bruno", role=Role.ALUNO))
    forged = jwt.encode({"id": 2, "login": "bruno", "role": "PROFESSOR"}, "x", algorithm="HS256")
    header, _, signature = token.split(".")
    _, payload, _ = forged.split(".")
    with pytest.raises(VerificationError) as exc:
        tokens.verify(f"{header}.{payload}.{signature}")
    assert exc.value.kind == VerificationFailure.BAD_SIGNATURE


@pytest.mark.parametrize("garbage", ["", "abc", "a.b", "a.b.c", "não-é-jwt"])
def test_garbage_token_is_malformed(tokens, garbage):
    with pytest.raises(VerificationError) as exc:
        tokens.verify(garbage)
    assert exc.value.kind == VerificationFailure.MALFORMED


@pytest.mark.parametrize("claims", [
    {"login": "ana1", "role": "PROFESSOR"},
    {"id": "1", "login": "ana1", "role": "PROFESSOR"},
    {"id": 1, "role": "PROFESSOR"},
    {"id": 1, "login": "ana1", "role": "ADMIN"},
    {"id": 1, "login": "ana1"},
])
def test_signed_token_with_bad_claims_is_malformed(tokens, claims):
    token = jwt.encode(claims, SECRET, algorithm="HS256")
    with pytest.raises(VerificationError) as exc:
        tokens.verify(token)
    assert exc.value.kind == VerificationFailure.MALFORMED


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        TokenService("")


def test_dev_secret_refused_in_production(monkeypatch):
    monkeypatch.setattr(settings, "SECRET_KEY", DEV_SECRET_KEY)
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    with pytest.raises(RuntimeError):
        ensure_signing_key()


def test_dev_secret_allowed_outside_production(monkeypatch):
    monkeypatch.setattr(settings, "SECRET_KEY", DEV_SECRET_KEY)
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    assert ensure_signing_key() is not None


def test_password_hasher_roundtrip():
    hasher = PasswordHasher()
    hashed = hasher.hash("secret123")
    assert hashed != "secret123"
    assert hasher.verify("secret123", hashed)
    assert not hasher.verify("wrong", hashed)


def test_password_hash_is_salted():
    hasher = PasswordHasher()
    assert hasher.hash("secret123") != hasher.hash("secret123")


@pytest.mark.parametrize("claim", ["exp", "iat"])
def test_signed_token_with_non_numeric_time_claim_is_malformed(tokens, claim):
    claims = {"id": 1, "login": "ana1", "role": "PROFESSOR", claim: "amanhã"}
    token = jwt.encode(claims, SECRET, algorithm="HS256")
    with pytest.raises(VerificationError) as exc:
        tokens.verify(token)
    assert exc.value.kind == VerificationFailure.MALFORMED
