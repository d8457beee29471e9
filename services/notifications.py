"""
Guest email notifications.

Confirmation emails are built in the request thread from a read-only
ReservationNotice and handed to a single background worker through a queue.
Delivery is retried with exponential backoff; failures are logged and never
propagate to the code that queued the message.
"""

import logging
import queue
import smtplib
import threading
import time
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

from jinja2 import Environment

from utils.datetime_helpers import format_long_date

logger = logging.getLogger(__name__)

_STOP = object()

_text_templates = Environment(autoescape=False, trim_blocks=True, lstrip_blocks=True)
_html_templates = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)


@dataclass(frozen=True)
class ReservationNotice:
    """Everything the confirmation email needs, captured after commit."""
    reservation_id: int
    guest_name: str
    guest_email: str
    room_number: int
    room_type: str
    start_date: str
    end_date: str
    total_price: float
    payment_method: str
    payment_config: Optional[dict] = None
    hotel_name: str = 'Palapa La Casona'
    currency: str = 'MXN'

    @property
    def pays_by_transfer(self) -> bool:
        return self.payment_method == 'transfer' and bool(self.payment_config)

    @property
    def formatted_total(self) -> str:
        return f'${self.total_price:,.2f} {self.currency}'


_TEXT_BODY = _text_templates.from_string('''\
¡Gracias por tu reserva, {{ n.guest_name }}!

Hemos recibido tu solicitud de reserva. Detalles de la estancia:

  Habitación: {{ n.room_type }} (No. {{ n.room_number }})
  Llegada: {{ arrival }}
  Salida: {{ departure }}
  Huésped: {{ n.guest_name }}
  Precio total: {{ n.formatted_total }}

{% if n.pays_by_transfer %}
Tu reserva está pendiente de confirmación. Realiza una transferencia por el monto total a:

  Banco: {{ n.payment_config.bank }}
  Cuenta bancaria: {{ n.payment_config.account_number }}
  CLABE: {{ n.payment_config.clabe }}

Envía el comprobante por WhatsApp para confirmar tu reserva: {{ n.payment_config.whatsapp_url }}
{% else %}
El pago de {{ n.formatted_total }} se realizará en efectivo al llegar al hotel durante el check-in.
Tu reserva permanece como "Pendiente" hasta el check-in.
{% endif %}

Esperamos verte pronto.
{{ n.hotel_name }}
''')

_HTML_BODY = _html_templates.from_string('''\
<div style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: auto;">
  <h1 style="color: #6C7D5C;">¡Gracias por tu reserva, {{ n.guest_name }}!</h1>
  <p>Hemos recibido tu solicitud de reserva. Aquí están los detalles:</p>
  <h3>Detalles de la Estancia</h3>
  <ul style="list-style: none; padding-left: 0;">
    <li><strong>Habitación:</strong> {{ n.room_type }} (No. {{ n.room_number }})</li>
    <li><strong>Llegada:</strong> {{ arrival }}</li>
    <li><strong>Salida:</strong> {{ departure }}</li>
    <li><strong>Huésped:</strong> {{ n.guest_name }}</li>
    <li><strong>Precio Total:</strong> <strong>{{ n.formatted_total }}</strong></li>
  </ul>
  <h3>Instrucciones de Pago</h3>
  {% if n.pays_by_transfer %}
  <p>Tu reserva está <strong>pendiente</strong> de confirmación. Realiza una transferencia por el monto total a los siguientes datos:</p>
  <div style="border: 1px dashed #D4AF37; padding: 15px;">
    <p><strong>Banco:</strong> {{ n.payment_config.bank }}</p>
    <p><strong>Cuenta Bancaria:</strong> {{ n.payment_config.account_number }}</p>
    <p><strong>CLABE:</strong> {{ n.payment_config.clabe }}</p>
  </div>
  <p>Una vez completado el pago envía el comprobante a nuestro
     <a href="{{ n.payment_config.whatsapp_url }}">WhatsApp</a> para que tu reserva pase a "Confirmada".</p>
  {% else %}
  <p>El pago de <strong>{{ n.formatted_total }}</strong> se realizará en <strong>efectivo</strong> al llegar al hotel durante el check-in.</p>
  <p style="color: #999;">Tu reserva está marcada como "Pendiente" hasta el check-in.</p>
  {% endif %}
  <p style="text-align: center; color: #999;">Esperamos verte pronto. ¡Buen viaje!</p>
</div>
''')


def build_confirmation_email(notice: ReservationNotice, sender: str = None) -> EmailMessage:
    """
    Build the 'reservation pending' email for a guest.

    Args:
        notice: Reservation snapshot
        sender: From address (optional)

    Returns:
        EmailMessage with plain-text and HTML alternatives
    """
    context = {
        'n': notice,
        'arrival': format_long_date(notice.start_date),
        'departure': format_long_date(notice.end_date),
    }

    message = EmailMessage()
    message['Subject'] = f'Reserva pendiente - {notice.hotel_name} ({notice.room_type})'
    if sender:
        message['From'] = formataddr((notice.hotel_name, sender))
    message['To'] = notice.guest_email
    message.set_content(_TEXT_BODY.render(context))
    message.add_alternative(_HTML_BODY.render(context), subtype='html')
    return message


class SmtpTransport:
    """Sends messages through an SMTP server, one connection per message."""

    def __init__(self, host, port=587, username=None, password=None, use_tls=True, timeout=15):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            host=config.get('MAIL_SERVER'),
            port=config.get('MAIL_PORT', 587),
            username=config.get('MAIL_USERNAME'),
            password=config.get('MAIL_PASSWORD'),
            use_tls=config.get('MAIL_USE_TLS', True),
        )

    def send(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(message)


class NotificationDispatcher:
    """
    Delivers guest emails off the request path.

    Configuration is read from the bound app on every notify() call:
    MAIL_ENABLED, MAIL_SENDER, NOTIFY_ASYNC, NOTIFY_MAX_ATTEMPTS and
    NOTIFY_BACKOFF_SECONDS. Assign `transport` to replace SMTP delivery.
    """

    def __init__(self, app=None, transport=None):
        self.app = None
        self._default_transport = transport
        self.transport = transport
        self._queue = queue.Queue()
        self._worker = None
        self._lock = threading.Lock()
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        self.transport = self._default_transport or SmtpTransport.from_config(app.config)
        app.extensions['notifier'] = self

    def _setting(self, key, default=None):
        if self.app is None:
            return default
        return self.app.config.get(key, default)

    def notify(self, notice: ReservationNotice) -> bool:
        """
        Queue the confirmation email for a reservation.

        Returns:
            True if the message was queued or delivered, False if mail is
            disabled and the message was dropped
        """
        if not self._setting('MAIL_ENABLED', False):
            logger.info('Mail disabled; confirmation for reservation %s to %s not sent',
                        notice.reservation_id, notice.guest_email)
            return False

        message = build_confirmation_email(notice, sender=self._setting('MAIL_SENDER'))
        job = (notice.reservation_id, message)

        if not self._setting('NOTIFY_ASYNC', True):
            self._deliver(job)
            return True

        self._ensure_worker()
        self._queue.put(job)
        return True

    def _ensure_worker(self):
        with self._lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(
                    target=self._run, name='notification-worker', daemon=True
                )
                self._worker.start()

    def _run(self):
        while True:
            job = self._queue.get()
            try:
                if job is _STOP:
                    return
                self._deliver(job)
            finally:
                self._queue.task_done()

    def _deliver(self, job) -> bool:
        reservation_id, message = job
        max_attempts = max(1, int(self._setting('NOTIFY_MAX_ATTEMPTS', 3)))
        backoff = float(self._setting('NOTIFY_BACKOFF_SECONDS', 2))

        for attempt in range(1, max_attempts + 1):
            try:
                self.transport.send(message)
                logger.info('Confirmation email for reservation %s sent to %s',
                            reservation_id, message['To'])
                return True
            except Exception as e:
                if attempt == max_attempts:
                    logger.error('Giving up on confirmation email for reservation %s after %s attempts: %s',
                                 reservation_id, attempt, e)
                    return False
                delay = backoff * (2 ** (attempt - 1))
                logger.warning('Confirmation email for reservation %s failed (attempt %s/%s): %s; retrying in %.1fs',
                               reservation_id, attempt, max_attempts, e, delay)
                if delay:
                    time.sleep(delay)
        return False

    def flush(self):
        """Block until every queued message has been handled."""
        self._queue.join()

    def shutdown(self):
        """Drain the queue and stop the worker thread."""
        with self._lock:
            worker = self._worker
            self._worker = None
        if worker is not None and worker.is_alive():
            self._queue.put(_STOP)
            worker.join()
