"""Tests for the Phase/Model Router."""

from types import SimpleNamespace

import pytest
from llm.router import DocStats, ModelConfig, ModelRouter, Phase, UserFlags


@pytest.fixture
def config():
    return ModelConfig(
        default="default-model",
        plan="plan-model",
        cost_mode="cost-model",
        fast="fast-model",
    )


@pytest.fixture
def router(config):
    return ModelRouter(config)


@pytest.fixture
def quiet_docs():
    return DocStats(pages=0, sources=0, conflicts=False)


# ── choose_model ──────────────────────────────────────

class TestChooseModel:
    def test_intake_cost_mode(self, router, quiet_docs):
        model = router.choose_model(Phase.INTAKE, quiet_docs, UserFlags(cost_mode=True))
        assert model == "cost-model"

    def test_intake_default_without_cost_mode(self, router, quiet_docs):
        assert router.choose_model(Phase.INTAKE, quiet_docs, UserFlags(cost_mode=False)) == "default-model"
        assert router.choose_model(Phase.INTAKE, quiet_docs) == "default-model"

    def test_intake_never_uses_plan_model(self, router):
        heavy = DocStats(pages=500, sources=50, conflicts=True)
        assert router.choose_model(Phase.INTAKE, heavy, UserFlags()) != "plan-model"

    def test_intake_cost_mode_falls_back_to_default(self, quiet_docs):
        router = ModelRouter(ModelConfig(default="default-model"))
        assert router.choose_model(Phase.INTAKE, quiet_docs, UserFlags(cost_mode=True)) == "default-model"

    def test_plan_phase(self, router, quiet_docs):
        assert router.choose_model(Phase.PLAN, quiet_docs) == "plan-model"

    def test_plan_phase_falls_back_to_default(self, quiet_docs):
        router = ModelRouter(ModelConfig(default="default-model"))
        assert router.choose_model(Phase.PLAN, quiet_docs) == "default-model"

    def test_plan_phase_ignores_cost_mode(self, router, quiet_docs):
        assert router.choose_model(Phase.PLAN, quiet_docs, UserFlags(cost_mode=True)) == "plan-model"

    @pytest.mark.parametrize("docs", [
        DocStats(pages=0, sources=0, conflicts=True),
        DocStats(pages=41, sources=0, conflicts=False),
        DocStats(pages=0, sources=7, conflicts=False),
    ])
    def test_research_escalation(self, router, docs):
        assert router.choose_model(Phase.RESEARCH, docs) == "plan-model"

    @pytest.mark.parametrize("docs", [
        DocStats(pages=40, sources=6, conflicts=False),
        DocStats(pages=10, sources=2, conflicts=False),
    ])
    def test_research_no_escalation(self, router, docs):
        assert router.choose_model(Phase.RESEARCH, docs) == "default-model"

    def test_fast_model_never_selected(self, router):
        for phase in Phase:
            for docs in (DocStats(), DocStats(pages=100, sources=10, conflicts=True)):
                for flags in (UserFlags(), UserFlags(cost_mode=True)):
                    assert router.choose_model(phase, docs, flags) != "fast-model"

    def test_deterministic(self, router):
        docs = DocStats(pages=45, sources=2, conflicts=False)
        results = {router.choose_model(Phase.RESEARCH, docs, UserFlags()) for _ in range(10)}
        assert results == {"plan-model"}

    def test_accepts_phase_string_value(self, router, quiet_docs):
        assert router.choose_model(Phase("plan"), quiet_docs) == "plan-model"

    def test_accepts_plain_string(self, router, quiet_docs):
        assert router.choose_model("intake", quiet_docs) == "default-model"

    def test_unknown_phase_rejected_at_boundary(self, router, quiet_docs):
        with pytest.raises(ValueError):
            Phase("brainstorm")
        with pytest.raises(ValueError):
            router.choose_model("brainstorm", quiet_docs)


# ── should_trigger_research ───────────────────────────

class TestShouldTriggerResearch:
    def test_pages_threshold(self, router):
        assert router.should_trigger_research(DocStats(pages=21), "general") is True
        assert router.should_trigger_research(DocStats(pages=20), "general") is False

    def test_sources_threshold(self, router):
        assert router.should_trigger_research(DocStats(sources=4), "general") is True
        assert router.should_trigger_research(DocStats(sources=3), "general") is False

    def test_conflicts(self, router):
        assert router.should_trigger_research(DocStats(pages=5, sources=2, conflicts=True), "general") is True

    def test_keyword_trigger(self, router, quiet_docs):
        assert router.should_trigger_research(quiet_docs, "Can you do a market review?") is True

    @pytest.mark.parametrize("query", [
        "Who are my COMPETITORS?",
        "benchmark us against peers",
        "Compare the two options",
        "Please Research this",
    ])
    def test_keywords_case_insensitive(self, router, quiet_docs, query):
        assert router.should_trigger_research(quiet_docs, query) is True

    def test_no_trigger(self, router, quiet_docs):
        assert router.should_trigger_research(quiet_docs, "general") is False

    def test_empty_query(self, router, quiet_docs):
        assert router.should_trigger_research(quiet_docs, None) is False
        assert router.should_trigger_research(quiet_docs, "") is False


# ── route / config ────────────────────────────────────

class TestRouteAndConfig:
    def test_route_combines_both_decisions(self, router):
        decision = router.route(Phase.RESEARCH, DocStats(pages=50), UserFlags(), "general")
        assert decision.model == "plan-model"
        assert decision.trigger_research is True
        assert decision.to_dict() == {"model": "plan-model", "triggerResearch": True}

    def test_config_from_settings(self):
        settings = SimpleNamespace(
            llm_default_model="d",
            llm_plan_model=None,
            llm_cost_mode_model="c",
            llm_fast_model="f",
        )
        config = ModelConfig.from_settings(settings)
        assert config.plan_model == "d"
        assert config.cost_mode_model == "c"
