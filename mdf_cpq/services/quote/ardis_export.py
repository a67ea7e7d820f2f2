"""
Ardis XML export.

Produces the fixed-schema order document consumed by the Ardis
manufacturing software. The downstream importer is sensitive to tag
names and field order, so the document is written line by line rather
than through an XML tree serializer.

Layout:
- ``<?xml ... encoding="Windows-1252" ?>`` declaration
- ``<ExportXML>`` root with one ``<Header>`` and one ``<Onderdeel>`` per line item
"""

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from mdf_cpq.config.settings import settings
from mdf_cpq.models.quote import Quote, QuoteLineItem
from mdf_cpq.services.quote.errors import EmptyQuoteExportError
from mdf_cpq.utils.logging import ServiceLogger
from mdf_cpq.utils.money import format_amount, round2

EXPORT_ENCODING = "cp1252"
XML_DECLARATION = '<?xml version="1.0" encoding="Windows-1252" ?>'

# Line descriptor ("LD") defaults
MODEL_SUFFIX = "GC"
MATERIAL = "MDF PL"
EDGE_PROCESSING = "0-0-0-0"
DEFAULT_COLOR_CODE = "C87"
PROCESSING_PARAMETERS = "GVD=0-GT=-GAF=0-GAAN=0-GDFR=0-ED=1"
HOLE_PARAMETERS = "LOC=9-30-GAT1=0-GAT2=0-GAT3=0-GAT4=0"
FINISH_CODE = "50-V"
COLOR_NAME = "ONBEKEND"
SECONDARY_FINISH = "200-200"
STEEL = "0"
DEFAULT_VARIANT_CODE = "07"
# One token per edge position; every position currently gets the same code
COLOR_CODES = "-".join([DEFAULT_COLOR_CODE] * 4)

_VARIANT_PATTERN = re.compile(r"\((\d+)\)")


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    number: str
    reference: str = ""


@dataclass(frozen=True)
class ArdisHeader:
    """Header block of the export document."""
    filename: str
    user: str
    date: str  # DD/MM/YYYY
    customer_name: str
    customer_number: str
    main_model: str
    main_material: str
    main_finish: str
    main_color: str
    customer_reference: str = ""
    main_remark: str = ""
    surcharge: Decimal | int = 0
    surcharge2: Decimal | int = 0


def escape_xml(text: str) -> str:
    """Escape the five XML metacharacters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def format_export_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def extract_variant_code(product_id: str) -> str | None:
    """Variant code in parentheses, e.g. ``P101(07)`` -> ``07``."""
    match = _VARIANT_PATTERN.search(product_id)
    return match.group(1) if match else None


def line_descriptor(line_item: QuoteLineItem) -> str:
    """
    Build the composite ``LD`` field.

    Example::

        P101(07)GC "AFM"1000x500x18 "MAT"MDF PL "KB"0-0-0-0 "C"C87-C87-C87-C87
        "GVD"GVD=0-GT=-GAF=0-GAAN=0-GDFR=0-ED=1  "GAT"LOC=9-30-GAT1=0-GAT2=0-GAT3=0-GAT4=0
        "AFW"50-V"KLR"ONBEKEND "AFW2"200-200     "Staal"0"PC"07

    (written on a single line). The quote characters are part of the
    format and are not escaped; the product id is.
    """
    config = line_item.configuration
    model = escape_xml(line_item.product_id)
    dimensions = f"{config.length_mm}x{config.width_mm}x{config.height_mm}"
    variant = extract_variant_code(line_item.product_id) or DEFAULT_VARIANT_CODE

    return (
        f'{model}{MODEL_SUFFIX} "AFM"{dimensions} "MAT"{MATERIAL} "KB"{EDGE_PROCESSING} '
        f'"C"{COLOR_CODES} "GVD"{PROCESSING_PARAMETERS}  "GAT"{HOLE_PARAMETERS} '
        f'"AFW"{FINISH_CODE}"KLR"{COLOR_NAME} "AFW2"{SECONDARY_FINISH}     '
        f'"Staal"{STEEL}"PC"{variant}'
    )


def _number(value: Decimal | int) -> str:
    return str(value or 0)


class ArdisExportService:
    """Service for exporting quotes to the Ardis XML order format."""

    def __init__(
        self,
        unprocessed_share: Decimal | None = None,
        finishing_share: Decimal | None = None,
    ):
        export_settings = settings.export
        self.unprocessed_share = (
            unprocessed_share if unprocessed_share is not None
            else export_settings.unprocessed_price_share
        )
        self.finishing_share = (
            finishing_share if finishing_share is not None
            else export_settings.finishing_price_share
        )
        self.logger = ServiceLogger("ardis_export")

    def export(self, quote: Quote, header: ArdisHeader, customer: CustomerInfo) -> str:
        """
        Convert a quote to an Ardis XML document.

        Raises:
            EmptyQuoteExportError: the quote has no line items
        """
        if quote.is_empty:
            raise EmptyQuoteExportError()

        lines = [XML_DECLARATION, "<ExportXML>"]
        lines.extend(self._header_lines(header))
        lines.append("          ")

        for index, line_item in enumerate(quote.line_items, start=1):
            lines.extend(self._part_lines(index, line_item, header, customer))
            lines.append("")

        lines.append("</ExportXML>")

        self.logger.log_event(
            "ardis_document_created",
            quote_id=quote.id,
            filename=header.filename,
            line_count=len(quote.line_items),
        )
        return "\n".join(lines)

    def export_bytes(self, quote: Quote, header: ArdisHeader, customer: CustomerInfo) -> bytes:
        """Export encoded as Windows-1252, as declared in the prolog."""
        return to_bytes(self.export(quote, header, customer))

    def split_price(self, unit_price: Decimal) -> tuple[Decimal, Decimal]:
        """Split a unit price into (unprocessed, finishing) parts."""
        return round2(unit_price * self.unprocessed_share), round2(unit_price * self.finishing_share)

    def _header_lines(self, header: ArdisHeader) -> list[str]:
        return [
            "<Header>",
            f"<Filenaam>{escape_xml(header.filename)}</Filenaam>",
            f"<User>{escape_xml(header.user)}</User>",
            f"<Datum>{escape_xml(header.date)}</Datum>",
            f"<KlantNaam>{escape_xml(header.customer_name)}</KlantNaam>",
            f"<KlantNummer>{escape_xml(header.customer_number)}</KlantNummer>",
            f"<KlantReferentie>{escape_xml(header.customer_reference)}</KlantReferentie>",
            f"<HoofdModel>{escape_xml(header.main_model)}</HoofdModel>",
            f"<HoofdGrondstof>{escape_xml(header.main_material)}</HoofdGrondstof>",
            f"<HoofdAfwerking>{escape_xml(header.main_finish)}</HoofdAfwerking>",
            f"<HoofdKleur>{escape_xml(header.main_color)}</HoofdKleur>",
            f"<HoofdOpm>{escape_xml(header.main_remark)}</HoofdOpm>",
            f"<Toeslag>{_number(header.surcharge)}</Toeslag>",
            f"<Toeslag2>{_number(header.surcharge2)}</Toeslag2>",
            "</Header>",
        ]

    def _part_lines(
        self,
        index: int,
        line_item: QuoteLineItem,
        header: ArdisHeader,
        customer: CustomerInfo,
    ) -> list[str]:
        unprocessed, finishing = self.split_price(line_item.unit_price)

        return [
            "<Onderdeel>",
            f"<KlantNaam>{escape_xml(customer.name)}</KlantNaam>",
            f"<KlantNummer>{escape_xml(customer.number)}</KlantNummer>",
            f"<KlantReferentie>{escape_xml(customer.reference)}</KlantReferentie>",
            f"<HoofdModel>{escape_xml(header.main_model)}</HoofdModel>",
            f"<HoofdAfwerking>{escape_xml(header.main_finish)}</HoofdAfwerking>",
            f"<HoofdKleur>{escape_xml(header.main_color)}</HoofdKleur>",
            f"<NR>{index:03d}</NR>",
            f"<Model>{escape_xml(line_item.product_id)}</Model>",
            f"<PartQty>{line_item.quantity}</PartQty>",
            f"<LD>{line_descriptor(line_item)}</LD>",
            f"<OPM>{escape_xml(line_item.description)}</OPM>",
            f"<PrijsOnbewerkt>{format_amount(unprocessed)}</PrijsOnbewerkt>",
            f"<PrijsAfwerk>{format_amount(finishing)}</PrijsAfwerk>",
            f"<PrijsBrutoEenheid>{format_amount(line_item.unit_price)}</PrijsBrutoEenheid>",
            "<Korting>0</Korting>",
            f"<PrijsNettoTotaal>{format_amount(line_item.line_total)}</PrijsNettoTotaal>",
            "</Onderdeel>",
        ]


def to_bytes(document: str) -> bytes:
    """Encode a document as Windows-1252; unmappable characters become numeric references."""
    return document.encode(EXPORT_ENCODING, errors="xmlcharrefreplace")


def default_header(
    filename: str,
    customer: CustomerInfo,
    export_date: date | None = None,
) -> ArdisHeader:
    """Header populated from ExportSettings."""
    export_settings = settings.export
    return ArdisHeader(
        filename=filename,
        user=export_settings.user,
        date=format_export_date(export_date or date.today()),
        customer_name=customer.name,
        customer_number=customer.number,
        customer_reference=customer.reference,
        main_model=export_settings.main_model,
        main_material=export_settings.main_material,
        main_finish=export_settings.main_finish,
        main_color=export_settings.main_color,
    )
