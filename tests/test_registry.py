import json
import pathlib
from datetime import date

import pytest

from hijama_site.exceptions import UnknownModuleType
from hijama_site.lunar import recommended_days_in_month
from hijama_site.models import ModuleInstance
from hijama_site.modules import build_registry
from hijama_site.registry import ModuleRegistry

FIX = pathlib.Path(__file__).parent / "fixtures"


def _echo(label):
    return lambda fields, key: {"by": label, "key": key, **fields}


def test_module_instance_collects_inline_fields():
    module = ModuleInstance.model_validate({"_type": "hero", "_key": "h1", "content": "Hi"})
    assert module.type_tag == "hero"
    assert module.key == "h1"
    assert module.fields == {"content": "Hi"}


def test_resolve_preserves_order_and_skips_unknown():
    registry = ModuleRegistry()
    registry.register("a", _echo("a"))
    registry.register("b", _echo("b"))
    modules = [
        {"_type": "b", "_key": "1"},
        {"_type": "a", "_key": "2"},
        {"_type": "mystery", "_key": "3"},
        {"_type": "b", "_key": "4"},
    ]
    out = registry.resolve(modules)
    assert [m.key for m in out] == ["1", "2", "4"]
    assert [m.type for m in out] == ["b", "a", "b"]


def test_last_registration_wins():
    registry = ModuleRegistry()
    registry.register("a", _echo("first"))
    registry.register("a", _echo("second"))
    (out,) = registry.resolve([ModuleInstance(type_tag="a", key="k")])
    assert out.data["by"] == "second"


def test_failing_handler_skips_only_its_module():
    registry = ModuleRegistry()
    registry.register("a", _echo("a"))
    registry.register("bad", lambda fields, key: fields["missing"])
    modules = [
        {"_type": "a", "_key": "1"},
        {"_type": "bad", "_key": "2"},
        {"_type": "a", "_key": "3"},
    ]
    assert [m.key for m in registry.resolve(modules)] == ["1", "3"]


def test_handler_for_unknown_tag():
    with pytest.raises(UnknownModuleType):
        ModuleRegistry().handler_for("nope")


def test_malformed_modules_are_skipped():
    registry = build_registry(lambda: date(2030, 1, 1))
    modules = [
        {"_type": "text-highlight-module", "_key": "short", "text": "too short"},
        {"_type": "appointment-form-module", "_key": "http", "endpoint": "http://insecure.example.com"},
        {"_key": "no-type"},
        {"_type": "text-highlight-module", "_key": "ok", "text": "Long enough to show"},
    ]
    assert [m.key for m in registry.resolve(modules)] == ["ok"]


def test_page_fixture_renders_known_modules():
    page = json.loads((FIX / "pages.json").read_text())["book"]
    registry = build_registry(lambda: date(2030, 1, 1))
    out = registry.resolve(page["modules"])
    assert [m.key for m in out] == ["quote-1", "appt", "contact"]

    appt = out[1].data
    assert appt["minDate"] == "2030-01-02"
    assert appt["maxDate"] == "2030-01-31"
    assert appt["defaultService"] == "General Hijama Session"
    assert [s["label"] for s in appt["services"]] == [
        "General Hijama Session - 60 min - $80",
        "Detox Session - 90 min",
    ]
    assert appt["messages"]["error"] == "Please call us instead."
    assert appt["messages"]["success"].startswith("Thank you for booking")
    assert [d["date"] for d in appt["recommendedDays"]] == [
        d.isoformat() for d in recommended_days_in_month(2030, 1)
    ]
    assert appt["prepInstructions"]["bringItems"] == ["2 full body towels"]

    contact = out[2].data
    assert [r["label"] for r in contact["reasons"]] == ["Contact", "Feedback", "Referral"]
    assert contact["defaultReason"] == "contact"

    quote = out[0].data
    assert quote["alignment"] == "center"
