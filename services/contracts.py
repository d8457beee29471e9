"""
PDF contracts for room stays and social-area events.

Contracts are rendered from HTML with Jinja and converted to PDF with
xhtml2pdf. Must be called inside an application context.
"""

import logging
from io import BytesIO

from flask import current_app, render_template_string
from xhtml2pdf import pisa

from models.errors import BookingError
from models.reservation_state import PAYMENT_METHOD_LABELS
from utils.datetime_helpers import format_long_date, get_today
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)


class ContractRenderError(BookingError):
    """The PDF converter failed."""

    kind = 'contract_error'
    status = 500


_BASE_STYLE = '''
    @page { size: a4 portrait; margin: 2.5cm; }
    body { font-family: Helvetica; font-size: 11pt; line-height: 1.5; color: #222; }
    h1 { font-size: 16pt; text-align: center; color: #1C2A3D; }
    h2 { font-size: 12pt; color: #6C7D5C; margin-top: 14pt; }
    table.data td { padding: 3pt 6pt; }
    .signatures td { width: 50%; text-align: center; padding-top: 40pt; }
'''

RESERVATION_CONTRACT = '''
<html>
<head><meta charset="utf-8"><style>{{ style }}</style></head>
<body>
  <h1>Contrato de Hospedaje</h1>
  <p>{{ hotel_name }}, a {{ today }}.</p>
  <p>Contrato que celebran por una parte <strong>{{ hotel_name }}</strong> y por la otra
     <strong>{{ guest_name }}</strong>, en adelante "el Huésped", conforme a lo siguiente:</p>

  <h2>Datos de la estancia</h2>
  <table class="data">
    <tr><td><strong>Folio:</strong></td><td>{{ reservation.id }}</td></tr>
    <tr><td><strong>Habitación:</strong></td><td>No. {{ reservation.room_number }} ({{ reservation.room_type }})</td></tr>
    <tr><td><strong>Llegada:</strong></td><td>{{ start_date }}</td></tr>
    <tr><td><strong>Salida:</strong></td><td>{{ end_date }}</td></tr>
    <tr><td><strong>Precio total:</strong></td><td>${{ '%.2f'|format(reservation.total_price or 0) }} {{ currency }}</td></tr>
    <tr><td><strong>Forma de pago:</strong></td><td>{{ payment_method }}</td></tr>
  </table>

  <h2>Cláusulas</h2>
  <p>1. El Huésped ocupará la habitación indicada durante el periodo señalado. La salida se realiza en la fecha de término.</p>
  <p>2. El precio total cubre las noches contratadas. Cualquier consumo adicional se cobra por separado.</p>
  <p>3. El Huésped se compromete a cuidar las instalaciones y responder por los daños que cause.</p>

  <table class="signatures">
    <tr><td>______________________<br>{{ hotel_name }}</td><td>______________________<br>{{ guest_name }}</td></tr>
  </table>
</body>
</html>
'''

EVENT_CONTRACT = '''
<html>
<head><meta charset="utf-8"><style>{{ style }}</style></head>
<body>
  <h1>Contrato de Arrendamiento de Área Social</h1>
  <p>{{ hotel_name }}, a {{ today }}.</p>
  <p>Contrato que celebran <strong>{{ hotel_name }}</strong> y <strong>{{ client_name }}</strong>,
     en adelante "el Cliente", para el uso del área descrita a continuación:</p>

  <h2>Datos del evento</h2>
  <table class="data">
    <tr><td><strong>Área:</strong></td><td>{{ event.rented_area or 'Área no especificada' }}</td></tr>
    <tr><td><strong>Fecha:</strong></td><td>{{ event_date }}</td></tr>
    {% if event.start_time %}
    <tr><td><strong>Horario:</strong></td><td>{{ event.start_time }}{% if event.end_time %} a {{ event.end_time }}{% endif %}</td></tr>
    {% endif %}
    {% if event.attendee_limit %}
    <tr><td><strong>Aforo máximo:</strong></td><td>{{ event.attendee_limit }} personas</td></tr>
    {% endif %}
    {% if event.usage_description %}
    <tr><td><strong>Uso:</strong></td><td>{{ event.usage_description }}</td></tr>
    {% endif %}
    <tr><td><strong>Monto:</strong></td><td>${{ '%.2f'|format(event.amount or 0) }} {{ currency }}</td></tr>
  </table>

  <h2>Cláusulas</h2>
  <p>1. El Cliente usará el área únicamente para el fin descrito y respetará el aforo máximo.</p>
  <p>2. El Cliente responde por los daños causados a las instalaciones durante el evento.</p>
  <p>3. El área debe entregarse limpia al término del horario contratado.</p>

  <table class="signatures">
    <tr><td>______________________<br>{{ hotel_name }}</td><td>______________________<br>{{ client_name }}</td></tr>
  </table>
</body>
</html>
'''


def _html_to_pdf(html: str, name: str) -> bytes:
    buffer = BytesIO()
    try:
        status = pisa.CreatePDF(html, dest=buffer, encoding='utf-8')
    except Exception as e:
        logger.exception('PDF conversion crashed for %s', name)
        raise ContractRenderError(MESSAGES['contract_error']) from e
    if status.err:
        logger.error('PDF conversion reported %s error(s) for %s', status.err, name)
        raise ContractRenderError(MESSAGES['contract_error'])
    return buffer.getvalue()


def _payment_label(method) -> str:
    for option, label in PAYMENT_METHOD_LABELS.items():
        if option.value == method:
            return label
    return 'No especificado'


def _common_context() -> dict:
    return {
        'style': _BASE_STYLE,
        'hotel_name': current_app.config.get('HOTEL_NAME', 'Palapa La Casona'),
        'currency': current_app.config.get('CURRENCY', 'MXN'),
        'today': format_long_date(get_today()),
    }


def render_reservation_contract(reservation: dict) -> bytes:
    """
    Render the lodging contract of a reservation.

    Args:
        reservation: Reservation dict with room details
            (see get_reservation_with_details)

    Returns:
        PDF document bytes

    Raises:
        ContractRenderError: If the PDF cannot be produced
    """
    html = render_template_string(
        RESERVATION_CONTRACT,
        reservation=reservation,
        guest_name=reservation.get('guest_name') or reservation.get('username') or 'Huésped',
        start_date=format_long_date(reservation['start_date']),
        end_date=format_long_date(reservation['end_date']),
        payment_method=_payment_label(reservation.get('payment_method')),
        **_common_context()
    )
    return _html_to_pdf(html, f"reservation {reservation['id']}")


def render_event_contract(event: dict) -> bytes:
    """
    Render the social-area rental contract of an event.

    Raises:
        ContractRenderError: If the PDF cannot be produced
    """
    html = render_template_string(
        EVENT_CONTRACT,
        event=event,
        client_name=event.get('client_name') or 'Cliente no especificado',
        event_date=format_long_date(event['event_date']) if event.get('event_date') else 'Fecha no especificada',
        **_common_context()
    )
    return _html_to_pdf(html, f"event {event['id']}")
