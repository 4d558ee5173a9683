"""Tests for script and lexicon based language detection."""

from __future__ import annotations

import pytest

from sevalink.language.detector import detect, resolve
from sevalink.models import Language


class TestDetect:
    def test_devanagari_is_hindi(self) -> None:
        assert detect("मुझे खून चाहिए") == Language.HINDI

    def test_telugu_script_is_telugu(self) -> None:
        assert detect("నాకు రక్తం కావాలి") == Language.TELUGU

    def test_plain_english(self) -> None:
        assert detect("street light not working") == Language.ENGLISH

    def test_empty_text_defaults_to_english(self) -> None:
        assert detect("") == Language.ENGLISH

    def test_mixed_scripts_majority_wins(self) -> None:
        # Telugu characters outnumber the single Hindi word
        assert detect("రక్తం కావాలి అత్యవసరం खून") == Language.TELUGU
        assert detect("मुझे तुरंत खून चाहिए రక్తం") == Language.HINDI

    def test_romanized_hindi(self) -> None:
        assert detect("mujhe khoon chahiye") == Language.HINDI

    def test_romanized_telugu(self) -> None:
        assert detect("naaku raktham kavali") == Language.TELUGU

    def test_positive_word_alone_is_english(self) -> None:
        assert detect("need o positive") == Language.ENGLISH

    @pytest.mark.parametrize("text", ["12345", "!!!", "🙂", "O+"])
    def test_never_raises_on_odd_input(self, text: str) -> None:
        assert detect(text) in (Language.ENGLISH, Language.HINDI, Language.TELUGU)


class TestResolve:
    def test_explicit_language_kept(self) -> None:
        assert resolve(Language.TELUGU, "hello") == Language.TELUGU

    def test_auto_detects(self) -> None:
        assert resolve(Language.AUTO, "मदद") == Language.HINDI

    def test_none_detects(self) -> None:
        assert resolve(None, "hello") == Language.ENGLISH

    def test_unknown_code_detects(self) -> None:
        assert resolve("fr", "నమస్తే") == Language.TELUGU
