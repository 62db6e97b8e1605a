# ===============================================
# tests/test_orchestrator.py
# Fan-out over personas, per-persona isolation,
# deterministic aggregation.
# ===============================================
import asyncio

import pytest

from critic_ai.critique import FeedbackMode, FeedbackOrchestrator
from critic_ai.critique.normalizer import APOLOGY
from critic_ai.critique.orchestrator import TRANSPORT_APOLOGY
from critic_ai.errors import FeedbackRequestError, ProviderConfigError

from conftest import ScriptedClient, comments_json

DOC = "The rain fell softly. The city slept. Somewhere, a dog barked twice."


def orchestrator(make_generator, registry, client):
    return FeedbackOrchestrator(generator=make_generator(client), registry=registry)


def test_all_personas_contribute_in_order(make_generator, registry):
    client = ScriptedClient(replies={
        "enthusiastic": comments_json("The city slept."),
        "analytical": comments_json("The rain fell softly.", "a dog barked"),
        "constructive": "```json\n" + comments_json("The rain") + "\n```",
        "creative": comments_json("Somewhere"),
    })
    out = orchestrator(make_generator, registry, client).run_sync(DOC)

    assert [(a.persona_id, a.start) for a in out] == [
        ("analytical", 0),
        ("constructive", 0),
        ("enthusiastic", 22),
        ("creative", 38),
        ("analytical", 49),
    ]
    for a in out:
        assert DOC[a.start:a.end] == a.quoted_text
    assert len(client.calls) == len(registry)


def test_total_failure_returns_one_fallback_per_persona(make_generator, registry):
    client = ScriptedClient(default=RuntimeError("provider down"))
    out = orchestrator(make_generator, registry, client).run_sync(DOC)

    assert len(out) == len(registry)
    assert [a.persona_id for a in out] == list(registry.ids())
    for a in out:
        assert a.fallback
        assert (a.start, a.end) == (0, 30)
        assert a.quoted_text == DOC[:30]
        assert a.comment == TRANSPORT_APOLOGY


def test_one_failing_persona_does_not_affect_others(make_generator, registry):
    client = ScriptedClient(
        replies={
            "analytical": TimeoutError("slow"),
            "creative": "definitely not json {",
        },
        default=comments_json("a dog barked"),
    )
    out = orchestrator(make_generator, registry, client).run_sync(DOC)
    by = {pid: out.for_persona(pid) for pid in registry.ids()}

    assert [(a.start, a.end) for a in by["analytical"]] == [(0, 30)]
    assert by["analytical"][0].comment == TRANSPORT_APOLOGY
    assert [(a.start, a.end) for a in by["creative"]] == [(0, 50)]
    assert by["creative"][0].comment == APOLOGY
    for pid in ("enthusiastic", "constructive"):
        assert [a.quoted_text for a in by[pid]] == ["a dog barked"]
        assert not by[pid][0].fallback


def test_fallback_on_short_document(make_generator, registry):
    client = ScriptedClient(default=ConnectionError("nope"))
    out = orchestrator(make_generator, registry, client).run_sync("Hi.")
    assert all((a.start, a.end) == (0, 3) for a in out)


def test_completion_order_does_not_change_result(make_generator, registry):
    replies = {
        "enthusiastic": comments_json("The rain", "slept"),
        "analytical": comments_json("The rain fell"),
        "constructive": comments_json("city", "dog"),
        "creative": comments_json("The"),
    }
    fast_first = ScriptedClient(replies=replies, delays={"enthusiastic": 0.05, "creative": 0.02})
    slow_first = ScriptedClient(replies=replies, delays={"analytical": 0.05, "constructive": 0.03})

    a = orchestrator(make_generator, registry, fast_first).run_sync(DOC)
    b = orchestrator(make_generator, registry, slow_first).run_sync(DOC)
    assert a.to_list() == b.to_list()


def test_calls_run_concurrently(make_generator, registry):
    client = ScriptedClient(default="[]", delays={pid: 0.2 for pid in registry.ids()})
    orch = orchestrator(make_generator, registry, client)

    async def timed():
        loop = asyncio.get_running_loop()
        t0 = loop.time()
        await orch.run(DOC)
        return loop.time() - t0

    # four sequential calls would take >= 0.8s
    assert asyncio.run(timed()) < 0.6


def test_rerun_is_identical(make_generator, registry):
    client = ScriptedClient(default=comments_json("The", "The", "dog"))
    orch = orchestrator(make_generator, registry, client)
    assert orch.run_sync(DOC).to_list() == orch.run_sync(DOC).to_list()


@pytest.mark.parametrize("doc", [None, "", "   \n\t"])
def test_blank_document_rejected_before_generation(make_generator, registry, doc):
    client = ScriptedClient()
    with pytest.raises(FeedbackRequestError):
        orchestrator(make_generator, registry, client).run_sync(doc)
    assert client.calls == []


def test_missing_credential_rejected_before_generation(make_generator, registry):
    client = ScriptedClient(configured=False)
    with pytest.raises(ProviderConfigError):
        orchestrator(make_generator, registry, client).run_sync(DOC)
    assert client.calls == []


def test_unknown_mode_rejected(make_generator, registry):
    with pytest.raises(FeedbackRequestError):
        orchestrator(make_generator, registry, ScriptedClient()).run_sync(DOC, mode="haiku")


def test_mode_changes_budget_not_resolution(make_generator, registry):
    client = ScriptedClient(default=comments_json("city"))
    orch = orchestrator(make_generator, registry, client)

    complete = orch.run_sync(DOC, mode=FeedbackMode.COMPLETE)
    progress = orch.run_sync(DOC, mode="progress")

    assert complete.to_list() == progress.to_list()
    budgets = sorted({params.max_tokens for _, _, params in client.calls})
    assert budgets == [300, 400]


def test_unparseable_nested_reply_is_isolated(make_generator, registry):
    client = ScriptedClient(replies={"creative": "[" * 100000}, default=comments_json("city"))
    out = orchestrator(make_generator, registry, client).run_sync(DOC)
    by = {pid: out.for_persona(pid) for pid in registry.ids()}

    assert [(a.start, a.end) for a in by["creative"]] == [(0, 50)]
    assert by["creative"][0].fallback
    assert by["creative"][0].comment == APOLOGY
    for pid in ("enthusiastic", "analytical", "constructive"):
        assert [a.quoted_text for a in by[pid]] == ["city"]


def test_anchoring_error_falls_back_for_that_persona_only(make_generator, registry, monkeypatch):
    import critic_ai.critique.orchestrator as orch_module

    real = orch_module.normalize_response

    def flaky(raw, document):
        if raw == "explode":
            raise RuntimeError("parser bug")
        return real(raw, document)

    monkeypatch.setattr(orch_module, "normalize_response", flaky)
    client = ScriptedClient(replies={"analytical": "explode"}, default=comments_json("dog"))
    out = orchestrator(make_generator, registry, client).run_sync(DOC)

    analytical = out.for_persona("analytical")
    assert [(a.start, a.end, a.fallback) for a in analytical] == [(0, 50, True)]
    assert analytical[0].comment == APOLOGY
    assert len(out) == len(registry)
    assert all(a.quoted_text == "dog" for a in out if a.persona_id != "analytical")
