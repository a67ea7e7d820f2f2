"""
Tests for the Ardis XML export.
"""

from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from mdf_cpq.services.pricing import calculate_price
from mdf_cpq.services.quote import (
    ArdisExportService,
    ArdisHeader,
    CustomerInfo,
    EmptyQuoteError,
    EmptyQuoteExportError,
    QuoteBuilder,
    default_header,
    escape_xml,
    format_export_date,
    line_descriptor,
    to_bytes,
)

from conftest import make_configuration, make_price


@pytest.fixture
def builder():
    ids = count(1)
    return QuoteBuilder(tax_rate=Decimal("0"), id_factory=lambda: f"line-{next(ids)}")


@pytest.fixture
def quote(builder, configuration):
    quote = builder.create_quote(quote_id="Q-1")
    return builder.add_line_item(
        quote, "P101(07)", "MDF Powder Coating", configuration, calculate_price(configuration)
    )


@pytest.fixture
def customer():
    return CustomerInfo(name="Meubelmakerij Jansen", number="C-100", reference="REF-7")


@pytest.fixture
def header(customer):
    return ArdisHeader(
        filename="quote-Q-1.xml",
        user="CPQ",
        date="18/10/2026",
        customer_name=customer.name,
        customer_number=customer.number,
        customer_reference=customer.reference,
        main_model="P101",
        main_material="MDF PL",
        main_finish="50-V",
        main_color="ONBEKEND",
    )


@pytest.fixture
def exporter():
    return ArdisExportService()


class TestEscapeXml:
    """Tests for escape_xml."""

    def test_escapes_all_metacharacters(self):
        assert escape_xml("a & b < c > d \" e ' f") == (
            "a &amp; b &lt; c &gt; d &quot; e &apos; f"
        )

    def test_ampersand_escaped_once(self):
        """Test entities are not escaped twice."""
        assert escape_xml("<&>") == "&lt;&amp;&gt;"


class TestLineDescriptor:
    """Tests for the composite LD field."""

    def test_standard_line(self, quote):
        assert line_descriptor(quote.line_items[0]) == (
            'P101(07)GC "AFM"1000x500x18 "MAT"MDF PL "KB"0-0-0-0 "C"C87-C87-C87-C87 '
            '"GVD"GVD=0-GT=-GAF=0-GAAN=0-GDFR=0-ED=1  "GAT"LOC=9-30-GAT1=0-GAT2=0-GAT3=0-GAT4=0 '
            '"AFW"50-V"KLR"ONBEKEND "AFW2"200-200     "Staal"0"PC"07'
        )

    def test_variant_from_product_id(self, builder):
        config = make_configuration(length_mm=600, width_mm=300, height_mm=30, quantity=1)
        quote = builder.add_line_item(builder.create_quote(), "P205(12)", "Board", config, make_price("10.00"))

        descriptor = line_descriptor(quote.line_items[0])

        assert descriptor.startswith('P205(12)GC "AFM"600x300x30 ')
        assert descriptor.endswith('"PC"12')

    def test_default_variant(self, builder, configuration):
        quote = builder.add_line_item(builder.create_quote(), "P300", "Board", configuration, make_price("10.00"))

        assert line_descriptor(quote.line_items[0]).endswith('"PC"07')


class TestArdisExport:
    """Tests for ArdisExportService.export."""

    def test_document_layout(self, exporter, quote, header, customer):
        """Test the complete document for a single line."""
        document = exporter.export(quote, header, customer)
        lines = document.split("\n")

        assert lines[0] == '<?xml version="1.0" encoding="Windows-1252" ?>'
        assert lines[1] == "<ExportXML>"
        assert lines[2:18] == [
            "<Header>",
            "<Filenaam>quote-Q-1.xml</Filenaam>",
            "<User>CPQ</User>",
            "<Datum>18/10/2026</Datum>",
            "<KlantNaam>Meubelmakerij Jansen</KlantNaam>",
            "<KlantNummer>C-100</KlantNummer>",
            "<KlantReferentie>REF-7</KlantReferentie>",
            "<HoofdModel>P101</HoofdModel>",
            "<HoofdGrondstof>MDF PL</HoofdGrondstof>",
            "<HoofdAfwerking>50-V</HoofdAfwerking>",
            "<HoofdKleur>ONBEKEND</HoofdKleur>",
            "<HoofdOpm></HoofdOpm>",
            "<Toeslag>0</Toeslag>",
            "<Toeslag2>0</Toeslag2>",
            "</Header>",
            "          ",
        ]
        assert lines[18] == "<Onderdeel>"
        assert lines[25] == "<NR>001</NR>"
        assert lines[26] == "<Model>P101(07)</Model>"
        assert lines[27] == "<PartQty>5</PartQty>"
        assert lines[28].startswith('<LD>P101(07)GC "AFM"1000x500x18 ')
        assert lines[30:36] == [
            "<PrijsOnbewerkt>33.20</PrijsOnbewerkt>",
            "<PrijsAfwerk>49.80</PrijsAfwerk>",
            "<PrijsBrutoEenheid>83.00</PrijsBrutoEenheid>",
            "<Korting>0</Korting>",
            "<PrijsNettoTotaal>415.00</PrijsNettoTotaal>",
            "</Onderdeel>",
        ]
        assert lines[36:] == ["", "</ExportXML>"]

    def test_part_repeats_customer_fields(self, exporter, quote, header, customer):
        lines = exporter.export(quote, header, customer).split("\n")

        assert lines[19:25] == [
            "<KlantNaam>Meubelmakerij Jansen</KlantNaam>",
            "<KlantNummer>C-100</KlantNummer>",
            "<KlantReferentie>REF-7</KlantReferentie>",
            "<HoofdModel>P101</HoofdModel>",
            "<HoofdAfwerking>50-V</HoofdAfwerking>",
            "<HoofdKleur>ONBEKEND</HoofdKleur>",
        ]

    def test_sequence_numbers(self, exporter, builder, quote, header, customer, configuration):
        """Test parts are numbered with three digits."""
        for _ in range(10):
            quote = builder.add_line_item(quote, "P101(07)", "Board", configuration, make_price("1.00"))

        document = exporter.export(quote, header, customer)

        assert document.count("<Onderdeel>") == 11
        assert "<NR>001</NR>" in document
        assert "<NR>011</NR>" in document

    def test_escapes_free_text(self, exporter, builder, header, configuration):
        """Test metacharacters in free text never reach the document raw."""
        name = "Jansen & Zn <\"Top\"> 'A'"
        quote = builder.add_line_item(builder.create_quote(), "P101(07)", name, configuration, make_price("1.00"))
        customer = CustomerInfo(name=name, number="C-1")

        document = exporter.export(quote, header, customer)
        opm = next(line for line in document.split("\n") if line.startswith("<OPM>"))

        assert "Jansen &amp; Zn &lt;&quot;Top&quot;&gt; &apos;A&apos;" in opm
        assert "<KlantNaam>Jansen &amp; Zn &lt;&quot;Top&quot;&gt; &apos;A&apos;</KlantNaam>" in document
        assert "& Zn" not in document
        assert "'A'" not in document

    def test_product_id_escaped(self, exporter, builder, header, customer, configuration):
        quote = builder.add_line_item(builder.create_quote(), "P<1>&2", "Board", configuration, make_price("1.00"))

        document = exporter.export(quote, header, customer)

        assert "<Model>P&lt;1&gt;&amp;2</Model>" in document
        assert '<LD>P&lt;1&gt;&amp;2GC "AFM"' in document

    def test_empty_quote_fails(self, exporter, builder, header, customer):
        with pytest.raises(EmptyQuoteExportError, match="Cannot export quote with no line items"):
            exporter.export(builder.create_quote(), header, customer)

    def test_empty_export_error_is_empty_quote_error(self):
        assert issubclass(EmptyQuoteExportError, EmptyQuoteError)

    def test_custom_price_split(self, quote, header, customer):
        """Test the unprocessed / finishing shares can be overridden."""
        exporter = ArdisExportService(unprocessed_share=Decimal("0.5"), finishing_share=Decimal("0.5"))

        document = exporter.export(quote, header, customer)

        assert "<PrijsOnbewerkt>41.50</PrijsOnbewerkt>" in document
        assert "<PrijsAfwerk>41.50</PrijsAfwerk>" in document

    def test_split_price_rounds_each_part(self, exporter):
        assert exporter.split_price(Decimal("10.05")) == (Decimal("4.02"), Decimal("6.03"))

    def test_surcharges(self, exporter, quote, header, customer):
        header = ArdisHeader(**{**header.__dict__, "surcharge": Decimal("12.5"), "surcharge2": 3})

        document = exporter.export(quote, header, customer)

        assert "<Toeslag>12.5</Toeslag>" in document
        assert "<Toeslag2>3</Toeslag2>" in document

    def test_deterministic(self, exporter, quote, header, customer):
        assert exporter.export(quote, header, customer) == exporter.export(quote, header, customer)


class TestEncodingAndHeader:
    """Tests for byte encoding and header defaults."""

    def test_to_bytes_windows_1252(self):
        assert to_bytes("Café €") == "Café €".encode("cp1252")

    def test_to_bytes_replaces_unmappable(self):
        assert to_bytes("\u03a9 1000") == b"&#937; 1000"

    def test_format_export_date(self):
        assert format_export_date(date(2026, 3, 7)) == "07/03/2026"

    def test_default_header(self, customer):
        header = default_header("out.xml", customer, export_date=date(2026, 10, 18))

        assert header.filename == "out.xml"
        assert header.date == "18/10/2026"
        assert header.user == "CPQ"
        assert header.main_model == "P101"
        assert header.main_material == "MDF PL"
        assert header.customer_name == customer.name
        assert header.customer_reference == "REF-7"

    def test_export_bytes(self, exporter, quote, header, customer):
        content = exporter.export_bytes(quote, header, customer)

        assert content.startswith(b'<?xml version="1.0" encoding="Windows-1252" ?>')
        assert "1000×500×18mm".encode("cp1252") in content
