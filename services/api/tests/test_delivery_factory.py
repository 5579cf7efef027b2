import pytest
from services.api.app.services.delivery_factory import get_delivery_policy


def test_get_delivery_policy_defaults_to_first_available(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DAWA_DELIVERY_POLICY", raising=False)
    policy = get_delivery_policy()
    assert policy.name == "first_available"


def test_get_delivery_policy_rejects_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DAWA_DELIVERY_POLICY", "nearest")
    with pytest.raises(ValueError, match="Unknown DAWA_DELIVERY_POLICY"):
        get_delivery_policy()
