"""Command-line wiring: configuration, provider selection, and the run/show/list commands."""

import pytest

import run_analysis
from data.gateway import SqlitePersistenceGateway
from data.storage import create_analysis, get_analysis, init_database
from llm import OllamaProvider, OpenAIProvider
from tests.factories import StubLLM, StubNews, make_articles
from workflows.orchestrator import AnalysisWorkflow
from workflows.stages import NewsCollector, ReportWriter, SentimentAnalyzer

ENV_VARS = (
    "LLM_PROVIDER",
    "LLM_MODEL",
    "CRYPTOPANIC_API_KEY",
    "OPENAI_API_KEY",
    "GEMINI_API_KEY",
    "CHROMA_URL",
    "OLLAMA_BASE_URL",
    "OLLAMA_MODEL",
)


@pytest.fixture
def env(monkeypatch, temp_db_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATABASE_PATH", temp_db_path)
    monkeypatch.setenv("CRYPTOPANIC_API_KEY", "cp-key")
    return monkeypatch


class TestBuildConfig:
    def test_defaults_to_ollama(self, env, temp_db_path):
        config = run_analysis.build_config()

        assert config.db_path == temp_db_path
        assert config.llm_provider == "ollama"
        assert config.llm_model is None
        assert config.cryptopanic_settings.api_key == "cp-key"
        assert config.openai_settings is None
        assert config.gemini_settings is None
        assert config.chroma_settings is None

    def test_invalid_provider(self, env):
        env.setenv("LLM_PROVIDER", "claude")

        with pytest.raises(ValueError, match="Invalid LLM_PROVIDER 'claude'"):
            run_analysis.build_config()

    def test_missing_news_key(self, env):
        env.delenv("CRYPTOPANIC_API_KEY")

        with pytest.raises(ValueError, match="CRYPTOPANIC_API_KEY"):
            run_analysis.build_config()

    def test_openai_requires_key(self, env):
        env.setenv("LLM_PROVIDER", "OpenAI")

        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            run_analysis.build_config()

    def test_openai_with_model_override(self, env):
        env.setenv("LLM_PROVIDER", "openai")
        env.setenv("OPENAI_API_KEY", "sk-test")
        env.setenv("LLM_MODEL", " gpt-5 ")

        config = run_analysis.build_config()

        assert config.openai_settings.api_key == "sk-test"
        assert config.llm_model == "gpt-5"

    def test_chroma_enabled_by_url(self, env):
        env.setenv("CHROMA_URL", "http://chroma:8000/")

        config = run_analysis.build_config()

        assert config.chroma_settings.base_url == "http://chroma:8000"


class TestBuildLLM:
    def test_ollama(self, env):
        env.setenv("LLM_MODEL", "mistral")

        llm = run_analysis.build_llm(run_analysis.build_config())

        assert isinstance(llm, OllamaProvider)
        assert llm.model_name == "mistral"

    def test_openai(self, env):
        env.setenv("LLM_PROVIDER", "openai")
        env.setenv("OPENAI_API_KEY", "sk-test")

        llm = run_analysis.build_llm(run_analysis.build_config())

        assert isinstance(llm, OpenAIProvider)


class TestBuildWorkflow:
    def test_vector_store_only_with_chroma(self, env):
        broadcaster = run_analysis.EventBroadcaster()
        llm = StubLLM()

        plain = run_analysis.build_workflow(run_analysis.build_config(), broadcaster, llm)
        env.setenv("CHROMA_URL", "http://chroma:8000")
        indexed = run_analysis.build_workflow(run_analysis.build_config(), broadcaster, llm)

        assert plain.stages[0].vector_store is None
        assert indexed.stages[0].vector_store is not None
        assert plain.publisher is broadcaster


class TestParser:
    def test_run_requires_symbols(self):
        with pytest.raises(SystemExit):
            run_analysis.build_parser().parse_args(["run"])

    def test_list_limit(self):
        args = run_analysis.build_parser().parse_args(["list", "--limit", "5"])

        assert args.command == "list"
        assert args.limit == 5

    def test_run_symbols(self):
        args = run_analysis.build_parser().parse_args(["run", "btc", "eth"])

        assert args.symbols == ["btc", "eth"]


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_invalid_symbols_exit_2(self, env):
        assert await run_analysis.run_command(["$$$"]) == 2

    @pytest.mark.asyncio
    async def test_missing_config_exit_1(self, env):
        env.delenv("CRYPTOPANIC_API_KEY")

        assert await run_analysis.run_command(["BTC"]) == 1

    @pytest.mark.asyncio
    async def test_runs_each_symbol(self, env, temp_db_path, monkeypatch):
        reply = '{"overallSentiment":"bearish","fearGreedIndex":20}'
        news = {"BTC": make_articles(2), "ETH": []}

        class PerSubjectNews(StubNews):
            async def fetch(self, subject, max_count):
                return news[subject]

        def fake_workflow(config, broadcaster, llm):
            return AnalysisWorkflow(
                gateway=SqlitePersistenceGateway(config.db_path),
                publisher=broadcaster,
                collector=NewsCollector(PerSubjectNews(), llm),
                analyzer=SentimentAnalyzer(llm),
                synthesizer=ReportWriter(llm),
            )

        monkeypatch.setattr(
            run_analysis, "build_llm", lambda config: StubLLM("summary", reply, "report")
        )
        monkeypatch.setattr(run_analysis, "build_workflow", fake_workflow)

        exit_code = await run_analysis.run_command(["btc", "eth"])

        assert exit_code == 1
        statuses = {
            a.subject: a.status.value for a in run_analysis.list_analyses(temp_db_path)
        }
        assert statuses == {"BTC": "completed", "ETH": "failed"}


class TestReadCommands:
    def test_show_unknown_analysis(self, env):
        assert run_analysis.show_command("missing") == 1

    def test_show_prints_outcomes(self, env, temp_db_path, capsys):
        init_database(temp_db_path)
        analysis = create_analysis(temp_db_path, "BTC")

        assert run_analysis.show_command(analysis.analysis_id) == 0

        out = capsys.readouterr().out
        assert f"Analysis {analysis.analysis_id} [BTC] pending" in out
        assert get_analysis(temp_db_path, analysis.analysis_id) is not None

    def test_list_prints_analyses(self, env, temp_db_path, capsys):
        init_database(temp_db_path)
        create_analysis(temp_db_path, "SOL")

        assert run_analysis.list_command(10) == 0

        assert "SOL" in capsys.readouterr().out
