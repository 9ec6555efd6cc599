"""
envelope.py - SOAP Request Envelope
====================================
Builds the retrieveCreditPosition request sent for one record.

The envelope is a fixed template with four text fields: the requester code
(Codice_AdR, the same for every request) and the record's action, client
code and lot code.
"""

from lxml import etree

from .config import DEFAULT_ADR_CODE
from .errors import EnvelopeError


SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
EIC_NS = "https://services.engie.it/ws/EICreditMgmtCM26.ws.provider:EAI_CM26"

ENVELOPE_TEMPLATE = """<soapenv:Envelope xmlns:soapenv="{soap_ns}" xmlns:eic="{eic_ns}">
    <soapenv:Header/>
    <soapenv:Body>
        <eic:retrieveCreditPosition>
            <Input>
                <Codice_AdR>{adr_code}</Codice_AdR>
                <Azione>{action}</Azione>
                <Codice_Cliente>{client_code}</Codice_Cliente>
                <Codice_LottoAffido>{lot_code}</Codice_LottoAffido>
            </Input>
        </eic:retrieveCreditPosition>
    </soapenv:Body>
</soapenv:Envelope>"""

INPUT_PATH = f"{{{SOAP_ENV_NS}}}Body/{{{EIC_NS}}}retrieveCreditPosition/Input"


def _fill_template(**fields) -> str:
    return ENVELOPE_TEMPLATE.format(soap_ns=SOAP_ENV_NS, eic_ns=EIC_NS, **fields)


def build_envelope(
    action: str,
    client_code: str,
    lot_code: str,
    adr_code: str = DEFAULT_ADR_CODE,
    escape_values: bool = True,
) -> str:
    """
    Fill the request template for one record.

    With escape_values=True the field texts are set through lxml, so &, <
    and > are escaped and each field's text is exactly the value given.
    With escape_values=False the values are pasted into the template as-is;
    a value containing markup then either changes the document or breaks it.

    Raises:
        EnvelopeError: If the resulting document is not well-formed XML
    """
    if not escape_values:
        envelope = _fill_template(
            adr_code=adr_code,
            action=action,
            client_code=client_code,
            lot_code=lot_code,
        )
        try:
            etree.fromstring(envelope.encode("utf-8"))
        except etree.XMLSyntaxError as e:
            raise EnvelopeError(
                f"Request for client {client_code!r} is not well-formed XML: {e}"
            ) from e
        return envelope

    root = etree.fromstring(
        _fill_template(adr_code="", action="", client_code="", lot_code="").encode("utf-8")
    )
    inp = root.find(INPUT_PATH)

    try:
        inp.find("Codice_AdR").text = adr_code
        inp.find("Azione").text = action
        inp.find("Codice_Cliente").text = client_code
        inp.find("Codice_LottoAffido").text = lot_code
    except ValueError as e:
        # lxml refuses control characters and other non-XML text
        raise EnvelopeError(
            f"Request for client {client_code!r} contains characters not allowed in XML: {e}"
        ) from e

    return etree.tostring(root, encoding="unicode")
