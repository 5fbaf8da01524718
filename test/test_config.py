"""Tests for provider selection from available credentials"""

from xeriscape_api.config import PROVIDERS, select_provider


class TestSelectProvider:

    def test_no_credentials(self):
        assert select_provider({}) is None

    def test_blank_credential_is_ignored(self):
        assert select_provider({"XAI_API_KEY": "  ", "OPENAI_API_KEY": ""}) is None

    def test_xai(self):
        selection = select_provider({"XAI_API_KEY": "xai-123"})
        assert selection.provider.name == "xAI"
        assert selection.api_key == "xai-123"
        assert selection.provider.chat_url == "https://api.x.ai/v1/chat/completions"
        assert selection.chat_model == "grok-vision"

    def test_openai(self):
        selection = select_provider({"OPENAI_API_KEY": "sk-123"})
        assert selection.provider.name == "OpenAI"
        assert selection.provider.chat_url == "https://api.openai.com/v1/chat/completions"
        assert selection.chat_model == "gpt-4o"

    def test_xai_wins_when_both_set(self):
        selection = select_provider({"XAI_API_KEY": "xai-123", "OPENAI_API_KEY": "sk-123"})
        assert selection.provider is PROVIDERS[0]

    def test_model_overrides(self):
        selection = select_provider(
            {"OPENAI_API_KEY": "sk-123", "AI_CHAT_MODEL": "gpt-4.1", "AI_IMAGE_MODEL": "gpt-image-1"}
        )
        assert selection.chat_model == "gpt-4.1"
        assert selection.image_model == "gpt-image-1"
