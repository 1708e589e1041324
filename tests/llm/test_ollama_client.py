import json
import unittest
from types import SimpleNamespace
from unittest.mock import patch

import requests

from smart_commit.llm.ollama_client import OllamaClient, strip_thinking_tags
from smart_commit.llm.provider import LLMError


class DummyResponse(SimpleNamespace):
    def json(self):
        return json.loads(self.text)


class TestOllamaClient(unittest.TestCase):
    def test_generate_success(self) -> None:
        captured = {}

        def fake_post(url, *_args, **kwargs):
            captured["url"] = url
            captured.update(kwargs)
            return DummyResponse(status_code=200, text=json.dumps({"response": "Hello"}))

        with patch("requests.post", fake_post):
            client = OllamaClient(model="qwen", base_url="http://localhost:11434/")
            self.assertEqual(client.generate("sys", "user"), "Hello")

        self.assertEqual(captured["url"], "http://localhost:11434/api/generate")
        self.assertEqual(captured["timeout"], 60.0)
        payload = captured["json"]
        self.assertEqual(payload["model"], "qwen")
        self.assertEqual(payload["system"], "sys")
        self.assertEqual(payload["prompt"], "user")
        self.assertFalse(payload["stream"])
        self.assertEqual(payload["options"], {"temperature": 0.3, "num_predict": 512})

    def test_generate_strips_thinking(self) -> None:
        body = {"response": "<think>hmm, a fix</think>\nFix crash"}

        def fake_post(url, *_args, **kwargs):
            return DummyResponse(status_code=200, text=json.dumps(body))

        with patch("requests.post", fake_post):
            self.assertEqual(OllamaClient().generate("s", "u"), "Fix crash")

    def test_generate_chat_style_body(self) -> None:
        body = {"message": {"role": "assistant", "content": "Add parser"}}

        def fake_post(url, *_args, **kwargs):
            return DummyResponse(status_code=200, text=json.dumps(body))

        with patch("requests.post", fake_post):
            self.assertEqual(OllamaClient().generate("s", "u"), "Add parser")

    def test_generate_error_status(self) -> None:
        def fake_post(url, *_args, **kwargs):
            return DummyResponse(status_code=500, text="Internal error")

        with patch("requests.post", fake_post):
            with self.assertRaises(LLMError):
                OllamaClient().generate("s", "u")

    def test_generate_invalid_json(self) -> None:
        def fake_post(url, *_args, **kwargs):
            return DummyResponse(status_code=200, text="not json")

        with patch("requests.post", fake_post):
            with self.assertRaises(LLMError):
                OllamaClient().generate("s", "u")

    def test_generate_unexpected_shape(self) -> None:
        def fake_post(url, *_args, **kwargs):
            return DummyResponse(status_code=200, text=json.dumps({"done": True}))

        with patch("requests.post", fake_post):
            with self.assertRaises(LLMError):
                OllamaClient().generate("s", "u")

    def test_complete_converts_network_error(self) -> None:
        def fake_post(url, *_args, **kwargs):
            raise requests.ConnectionError("refused")

        with patch("requests.post", fake_post):
            result = OllamaClient(model="llama3").complete("s", "u")
        self.assertFalse(result.ok)
        self.assertIn("refused", result.error)
        self.assertIsNone(result.text)

    def test_name(self) -> None:
        self.assertEqual(OllamaClient(model="mistral").name, "Ollama (mistral)")


class TestStripThinkingTags(unittest.TestCase):
    def test_all_tag_kinds(self) -> None:
        text = "<THINKING>a</THINKING><thought>b</thought><reasoning>\nc\n</reasoning> Answer "
        self.assertEqual(strip_thinking_tags(text), "Answer")

    def test_plain_text_untouched(self) -> None:
        self.assertEqual(strip_thinking_tags("Add tests"), "Add tests")


if __name__ == "__main__":
    unittest.main()
