from io import BytesIO

import qrcode


def generate_qr_png(data: str) -> bytes:
    """
    Render the given string as a QR code for the printable ID card.

    :param data: The string to encode in the QR code
    :return: PNG image bytes
    """
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color='black', back_color='white')

    buffered = BytesIO()
    img.save(buffered, format='PNG')
    return buffered.getvalue()
