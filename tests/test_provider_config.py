import unittest
import sys
from dataclasses import replace
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_optimizer.ai.config import has_credentials, load_provider_configs  # noqa: E402
from resume_optimizer.ai.factory import build_providers  # noqa: E402
from resume_optimizer.core.config import settings  # noqa: E402


def _settings(**overrides):
    base = {
        "provider_order": ("openai", "gemini", "claude"),
        "provider_max_retries": 2,
        "openai_api_key": None,
        "gemini_api_key": None,
        "anthropic_api_key": None,
    }
    base.update(overrides)
    return replace(settings, **base)


class ProviderConfigTests(unittest.TestCase):
    def test_default_priority_order(self):
        configs = load_provider_configs(_settings())
        self.assertEqual([cfg.name for cfg in configs], ["openai", "gemini", "claude"])
        self.assertEqual([cfg.max_retries for cfg in configs], [2, 2, 1])

    def test_custom_order_ignores_unknown_and_duplicates(self):
        configs = load_provider_configs(_settings(provider_order=("Claude", "mistral", "openai", "claude")))
        self.assertEqual([cfg.name for cfg in configs], ["claude", "openai"])

    def test_placeholder_keys_count_as_missing(self):
        configs = load_provider_configs(
            _settings(openai_api_key="your_openai_key", gemini_api_key="changeme", anthropic_api_key="sk-ant-123")
        )
        self.assertEqual([has_credentials(cfg) for cfg in configs], [False, False, True])

    def test_providers_without_credentials_are_skipped(self):
        with self.assertLogs("resume_optimizer.ai.factory", level="WARNING") as logs:
            providers = build_providers(_settings())
        self.assertEqual(providers, [])
        self.assertEqual(len(logs.output), 3)

    def test_build_providers_keeps_priority(self):
        providers = build_providers(
            _settings(provider_order=("claude", "openai"), openai_api_key="sk-test", anthropic_api_key="sk-ant-test")
        )
        self.assertEqual([provider.name for provider in providers], ["claude", "openai"])
        self.assertEqual(providers[0].timeout_s, settings.provider_timeout_s)


if __name__ == "__main__":
    unittest.main()
