"""
Tests for the retrieveCreditPosition request envelope.
"""
import pytest
from lxml import etree

from creditpos.envelope import EIC_NS, SOAP_ENV_NS, build_envelope
from creditpos.errors import EnvelopeError


def _fields(envelope: str) -> dict:
    root = etree.fromstring(envelope.encode("utf-8"))
    inp = root.find(f"{{{SOAP_ENV_NS}}}Body/{{{EIC_NS}}}retrieveCreditPosition/Input")
    return {child.tag: child.text or "" for child in inp}


class TestBuildEnvelope:

    def test_fields_are_filled(self):
        fields = _fields(build_envelope("A", "100", "L1"))

        assert fields == {
            "Codice_AdR": "AXTR2505",
            "Azione": "A",
            "Codice_Cliente": "100",
            "Codice_LottoAffido": "L1",
        }

    def test_only_the_fields_differ_between_records(self):
        first = build_envelope("A", "100", "L1")
        second = build_envelope("B", "200", "L2")

        assert first.replace(">A<", ">B<").replace(">100<", ">200<").replace(">L1<", ">L2<") == second

    def test_empty_values_allowed(self):
        fields = _fields(build_envelope("", "", ""))

        assert fields["Azione"] == ""
        assert fields["Codice_Cliente"] == ""
        assert fields["Codice_LottoAffido"] == ""

    def test_adr_code_is_configurable(self):
        assert _fields(build_envelope("A", "1", "L", adr_code="ZZ01"))["Codice_AdR"] == "ZZ01"

    def test_special_characters_are_escaped(self):
        envelope = build_envelope("A&B", "<100>", "L1")

        assert "A&amp;B" in envelope
        fields = _fields(envelope)
        assert fields["Azione"] == "A&B"
        assert fields["Codice_Cliente"] == "<100>"

    def test_escaped_mode_keeps_markup_out_of_the_document(self):
        root = etree.fromstring(build_envelope("<x/>", "100", "L1").encode("utf-8"))

        assert root.find(f".//{{{EIC_NS}}}retrieveCreditPosition/Input/x") is None
        assert _fields(build_envelope("<x/>", "100", "L1"))["Azione"] == "<x/>"

    def test_control_characters_are_rejected(self):
        with pytest.raises(EnvelopeError, match="not allowed in XML"):
            build_envelope("A", "1\x01", "L1")

    def test_verbatim_mode_matches_escaped_mode_for_plain_values(self):
        verbatim = build_envelope("A", "100", "L1", escape_values=False)

        assert _fields(verbatim) == _fields(build_envelope("A", "100", "L1"))
        assert "<Azione>A</Azione>" in verbatim

    def test_verbatim_mode_rejects_markup_that_breaks_the_document(self):
        with pytest.raises(EnvelopeError, match="not well-formed"):
            build_envelope("A&B", "100", "L1", escape_values=False)
