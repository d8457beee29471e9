"""
Centralized Spanish UI messages.
All user-facing text in Spanish for consistency.
"""

MESSAGES = {
    # Success messages
    'login_success': 'Inicio de sesión exitoso',
    'logout_success': 'Sesión cerrada correctamente',
    'reservation_created': 'Reserva creada con éxito',
    'reservation_updated': 'Reserva actualizada correctamente',
    'reservation_deleted': 'Reserva eliminada con éxito',
    'room_created': 'Habitación creada con éxito',
    'room_updated': 'Habitación actualizada con éxito',
    'room_deleted': 'Habitación eliminada con éxito',
    'images_uploaded': '{count} imagen(es) subida(s) correctamente',
    'image_deleted': 'Imagen eliminada',
    'images_reordered': 'Orden de imágenes actualizado',
    'event_created': 'Evento creado con éxito',
    'event_updated': 'Evento actualizado correctamente',
    'event_deleted': 'Evento eliminado con éxito',
    'category_created': 'Categoría creada con éxito',
    'category_updated': 'Categoría actualizada correctamente',
    'category_deleted': 'Categoría eliminada',
    'menu_item_created': 'Ítem del menú creado con éxito',
    'menu_item_updated': 'Ítem del menú actualizado con éxito',
    'menu_item_deleted': 'Ítem del menú eliminado con éxito',
    'user_created': 'Usuario creado exitosamente',
    'user_updated': 'Usuario actualizado correctamente',
    'user_deleted': 'Usuario eliminado',
    'payment_config_updated': 'Configuración de pago actualizada',

    # Error messages
    'invalid_credentials': 'Usuario o contraseña incorrectos',
    'credentials_required': 'Usuario y contraseña son requeridos',
    'login_required': 'Debe iniciar sesión para acceder a este recurso',
    'permission_denied': 'No tiene permisos para esta acción',
    'not_found': 'Ruta no encontrada',
    'method_not_allowed': 'Método no permitido',
    'payload_too_large': 'El archivo excede el tamaño máximo permitido',
    'server_error': 'Error interno del servidor',
    'json_required': 'Se requiere un cuerpo JSON',

    'reservation_required_fields': 'Faltan datos obligatorios (habitación, fechas, tipo de pago)',
    'dates_required': 'Se requieren las fechas de inicio y fin',
    'invalid_date': 'Formato de fecha inválido: {value}',
    'invalid_date_range': 'La fecha de salida debe ser estrictamente posterior a la de llegada',
    'invalid_stay': 'La estancia debe ser de al menos un día',
    'double_booking': 'Conflicto: La habitación ya está reservada para las fechas seleccionadas',
    'invalid_status': 'Estado no válido: {value}',
    'invalid_transition': 'No se puede cambiar el estado de "{current}" a "{new}"',
    'invalid_payment_method': 'Tipo de pago no válido: {value}',
    'reservation_not_found': 'Reserva no encontrada',
    'no_fields_to_update': 'Se requiere al menos un campo para actualizar',

    'room_required_fields': 'Número, tipo y precio son obligatorios',
    'invalid_room_number': 'El número de habitación debe ser un entero positivo',
    'invalid_price': 'El precio debe ser un número positivo',
    'room_not_found': 'Habitación no encontrada',
    'room_number_exists': 'La habitación con el número {number} ya existe',
    'room_has_reservations': 'No se puede eliminar una habitación con reservas activas',
    'image_required': 'No se seleccionó ninguna imagen',
    'invalid_image_type': 'Tipo de archivo no permitido: {filename}',
    'image_too_large': 'La imagen {filename} excede el tamaño máximo de {max_mb} MB',
    'image_not_found': 'Imagen no encontrada',
    'invalid_image_order': 'El orden debe incluir exactamente las imágenes de la habitación',

    'event_required_fields': 'Nombre del cliente, fecha del evento y monto son obligatorios',
    'invalid_amount': 'El monto no puede ser negativo',
    'invalid_attendee_limit': 'El límite de asistentes debe ser un entero positivo',
    'invalid_time': 'Formato de hora inválido (HH:MM): {value}',
    'invalid_time_window': 'La hora de fin debe ser posterior a la hora de inicio',
    'event_not_found': 'Evento no encontrado',

    'category_name_required': 'El nombre de la categoría es obligatorio',
    'category_exists': 'La categoría "{name}" ya existe',
    'category_not_found': 'La categoría especificada no existe',
    'category_has_items': 'No se puede eliminar una categoría con ítems',
    'menu_item_required_fields': 'Nombre, precio y categoría son obligatorios',
    'menu_item_not_found': 'Ítem no encontrado',

    'username_required': 'El nombre de usuario es obligatorio',
    'username_exists': 'El nombre de usuario ya existe',
    'phone_exists': 'El teléfono ya está registrado',
    'invalid_email': 'Formato de correo electrónico inválido',
    'invalid_phone': '{value} no es un número de teléfono válido (requiere 10 dígitos)',
    'invalid_role': 'Rol no válido: {value}',
    'user_not_found': 'Usuario no encontrado',
    'cannot_delete_self': 'No puede eliminarse a sí mismo',

    'payment_config_required_fields': 'Banco, cuenta, CLABE y WhatsApp son obligatorios',
    'payment_config_not_found': 'Configuración de contacto no encontrada',
    'contract_error': 'Error al generar el contrato en PDF',
}
