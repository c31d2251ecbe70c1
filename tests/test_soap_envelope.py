"""Tests for SOAP envelope building and flat-record parsing."""

import pytest

from travelfunnel.integrations.soap import (
    CORIS_NAMESPACE,
    SoapParseError,
    build_envelope,
    extract_tag_value,
    extract_tag_values,
    parse_records,
    soap_action,
)


def test_build_envelope_serializes_params_in_order():
    xml = build_envelope("BuscarPlanosNovosV13", {"login": "u", "senha": "p", "destino": "4", "vigencia": 10})

    assert f'<BuscarPlanosNovosV13 xmlns="{CORIS_NAMESPACE}">' in xml
    assert xml.index('name="login"') < xml.index('name="senha"') < xml.index('name="destino"') < xml.index('name="vigencia"')
    assert '<param name="vigencia" value="10" />' in xml
    assert "<soap:Body>" in xml


def test_build_envelope_escapes_values():
    xml = build_envelope("GravarPedido", {"contato": 'Ana "A" <&> Souza', "email": None})

    assert '<param name="contato" value="Ana &quot;A&quot; &lt;&amp;&gt; Souza" />' in xml
    assert '<param name="email" value="" />' in xml


def test_soap_action_is_namespace_plus_method():
    assert soap_action("EmitirPedido") == "http://www.coris.com.br/WebService/EmitirPedido"


def test_parse_records_ignores_namespaces_and_empty_children(make_soap):
    xml = make_soap(
        "<buscaPlanos><id>10</id><nome> CORIS 60 </nome><vazio></vazio></buscaPlanos>"
        "<buscaPlanos><id>11</id><nome>CORIS 100</nome></buscaPlanos>",
        method="BuscarPlanosNovosV13",
    )

    assert parse_records(xml, "buscaPlanos") == [
        {"id": "10", "nome": "CORIS 60"},
        {"id": "11", "nome": "CORIS 100"},
    ]


def test_parse_records_skips_nested_children():
    xml = "<root><buscaPrecos><totalrs>10,00</totalrs><detalhe><x>1</x></detalhe></buscaPrecos></root>"
    assert parse_records(xml, "buscaPrecos") == [{"totalrs": "10,00"}]


def test_parse_records_reads_escaped_payload(make_soap):
    xml = make_soap(
        "&lt;?xml version=&quot;1.0&quot;?&gt;&lt;buscaPrecos&gt;&lt;totalrs&gt;123,45&lt;/totalrs&gt;&lt;/buscaPrecos&gt;",
        method="BuscarPrecosIndividualV13",
    )
    assert parse_records(xml, "buscaPrecos") == [{"totalrs": "123,45"}]


def test_parse_records_returns_empty_list_when_tag_absent(make_soap):
    assert parse_records(make_soap("<outro>1</outro>"), "buscaPlanos") == []


def test_extract_tag_value_and_values():
    xml = "<r><erro>0</erro><voucher>A1</voucher><voucher>A2</voucher><voucher> </voucher></r>"

    assert extract_tag_value(xml, "erro") == "0"
    assert extract_tag_value(xml, "idpedido") is None
    assert extract_tag_values(xml, "voucher") == ["A1", "A2"]


def test_malformed_xml_raises_soap_parse_error():
    with pytest.raises(SoapParseError):
        parse_records("<soap:Envelope><unclosed>", "buscaPlanos")
