import io
import base64

from django.utils import timezone
from PIL import Image, ImageDraw, ImageFont

# --- CONFIGURATION ---
PRINTER_WIDTH = 512  # Standard 80mm
FONT_PATH = "DejaVuSans.ttf"
CURRENCY = "EUR"


def _get_draw_obj():
    img = Image.new('RGB', (PRINTER_WIDTH, 2000), color=(255, 255, 255))
    draw = ImageDraw.Draw(img)
    try:
        fonts = {
            'sm': ImageFont.truetype(FONT_PATH, 20),
            'md': ImageFont.truetype(FONT_PATH, 26),
            'bg': ImageFont.truetype(FONT_PATH, 34),
            'xl': ImageFont.truetype(FONT_PATH, 48),
        }
    except OSError:
        default = ImageFont.load_default()
        fonts = {'sm': default, 'md': default, 'bg': default, 'xl': default}
    return img, draw, fonts


def _draw_line(draw, y, width=2):
    draw.line((0, y, PRINTER_WIDTH, y), fill=0, width=width)
    return y + 15


def _finalize_image(img, y_pos):
    img = img.crop((0, 0, PRINTER_WIDTH, y_pos + 40))
    img = img.convert('1')
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return base64.b64encode(buf.getvalue()).decode('utf-8')


def _draw_columns(draw, y, name, qty, price, fonts):
    """Name left, quantity centred, price right-aligned at x=500."""
    display_name = (name[:18] + '..') if len(name) > 20 else name
    draw.text((10, y), display_name, fill=0, font=fonts['bg'])
    draw.text((300, y), str(qty), fill=0, font=fonts['bg'])

    if price is not None:
        price_str = f"{price:.2f}"
        bbox = draw.textbbox((0, 0), price_str, font=fonts['bg'])
        draw.text((500 - (bbox[2] - bbox[0]), y), price_str, fill=0, font=fonts['bg'])

    return y + 50


def _header(draw, y, order, fonts):
    draw.text((10, y), f"Order {order.order_number}", fill=0, font=fonts['bg'])
    y += 50
    table = order.table_number if order.table_number is not None else "-"
    draw.text((10, y), f"Table: {table}", fill=0, font=fonts['md'])
    y += 40
    if order.customer_name:
        draw.text((10, y), f"Customer: {order.customer_name}", fill=0, font=fonts['md'])
        y += 40
    waiter = order.waiter.name if order.waiter else "N/A"
    draw.text((10, y), f"Waiter: {waiter}", fill=0, font=fonts['md'])
    y += 40
    return y


def group_lines(order_items):
    """Merge lines of the same dish at the same price: {(name, unit_price): quantity}."""
    grouped = {}
    for item in order_items:
        key = (item.menu_item.name, item.unit_price)
        grouped[key] = grouped.get(key, 0) + item.quantity
    return grouped


# --- RECEIPTS ---

def bill_receipt(order):
    img, draw, fonts = _get_draw_obj()
    y = _header(draw, 20, order, fonts)
    opened = timezone.localtime(order.c_at).strftime('%d/%m/%y %H:%M')
    draw.text((10, y), f"Opened: {opened}", fill=0, font=fonts['md'])
    y += 30
    if order.completed_at:
        closed = timezone.localtime(order.completed_at).strftime('%d/%m/%y %H:%M')
        draw.text((10, y), f"Closed: {closed}", fill=0, font=fonts['md'])
        y += 30
    y = _draw_line(draw, y)

    draw.text((10, y), "Item", fill=0, font=fonts['sm'])
    draw.text((300, y), "Qty", fill=0, font=fonts['sm'])
    draw.text((430, y), "Price", fill=0, font=fonts['sm'])
    y += 30

    items = order.order_items.select_related('menu_item')
    for (name, unit_price), qty in group_lines(items).items():
        y = _draw_columns(draw, y, name, qty, qty * unit_price, fonts)
        draw.line((10, y, PRINTER_WIDTH - 10, y), fill=0, width=1)
        y += 10

    y = _draw_line(draw, y)
    draw.text((10, y), f"TOTAL: {order.total:.2f} {CURRENCY}", fill=0, font=fonts['xl'])
    y += 65

    return _finalize_image(img, y)


def kitchen_ticket(order, order_items):
    """Preparation ticket for the given lines; no prices."""
    img, draw, fonts = _get_draw_obj()
    y = _header(draw, 20, order, fonts)
    draw.text((10, y), f"Time: {timezone.localtime().strftime('%d/%m/%y %H:%M')}", fill=0, font=fonts['md'])
    y += 40
    y = _draw_line(draw, y)

    for item in order_items:
        y = _draw_columns(draw, y, item.menu_item.name, item.quantity, None, fonts)
        if item.notes:
            draw.text((30, y), item.notes[:40], fill=0, font=fonts['sm'])
            y += 30
        draw.line((10, y, PRINTER_WIDTH - 10, y), fill=0, width=1)
        y += 10

    return _finalize_image(img, y)
