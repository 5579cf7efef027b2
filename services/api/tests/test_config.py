import pytest
from services.api.app.config import allow_confirmed_transaction_reuse, env_flag, offer_discount_floor


def test_env_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DAWA_SOME_FLAG", raising=False)
    assert env_flag("DAWA_SOME_FLAG", default=True) is True

    monkeypatch.setenv("DAWA_SOME_FLAG", "No")
    assert env_flag("DAWA_SOME_FLAG", default=True) is False

    monkeypatch.setenv("DAWA_SOME_FLAG", "maybe")
    with pytest.raises(ValueError, match="Unknown DAWA_SOME_FLAG"):
        env_flag("DAWA_SOME_FLAG", default=True)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DAWA_OFFER_DISCOUNT_FLOOR", raising=False)
    monkeypatch.delenv("DAWA_ALLOW_CONFIRMED_TRANSACTION_REUSE", raising=False)

    assert offer_discount_floor() == "none"
    assert allow_confirmed_transaction_reuse() is True


def test_offer_discount_floor_rejects_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DAWA_OFFER_DISCOUNT_FLOOR", "half")
    with pytest.raises(ValueError, match="Unknown DAWA_OFFER_DISCOUNT_FLOOR"):
        offer_discount_floor()
