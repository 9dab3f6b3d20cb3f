import csv

from django.http import HttpResponse


def csv_response(filename, headers, rows):
    """CSV attachment; `rows` is any iterable of sequences matching `headers`."""
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    writer = csv.writer(response)
    writer.writerow(headers)
    writer.writerows(rows)
    return response
