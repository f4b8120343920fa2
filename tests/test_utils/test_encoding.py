"""
Tests for document content encoding.
"""

from medisave.utils.encoding import decode_content, encode_content


class TestEncodeContent:
    def test_matches_uri_component_encoding(self) -> None:
        assert encode_content("a b&c=d/e") == "a%20b%26c%3Dd%2Fe"

    def test_unreserved_characters_kept(self) -> None:
        assert encode_content("A-z_0.9!~*'()") == "A-z_0.9!~*'()"

    def test_utf8(self) -> None:
        assert encode_content("µg/dL") == "%C2%B5g%2FdL"

    def test_decode_restores_text(self) -> None:
        text = "cell A1=Hemoglobin 13.5 g/dL\nnote: \"fasting\""
        assert decode_content(encode_content(text)) == text
