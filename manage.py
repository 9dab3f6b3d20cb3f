#!/usr/bin/env python
import os
import sys
from waitress import serve


def main():
    """Run administrative tasks, or serve the API with Waitress when called without arguments."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

    # Import the WSGI application (must happen AFTER setting settings path)
    from django.core.management import execute_from_command_line

    if len(sys.argv) == 1:
        from config.wsgi import application

        host = os.environ.get('POS_HOST', '0.0.0.0')
        port = int(os.environ.get('POS_PORT', '8000'))
        threads = int(os.environ.get('POS_THREADS', '10'))
        print("Starting Waitress Production Server...")
        print(f"Serving on http://{host}:{port} with {threads} threads")
        serve(application, host=host, port=port, threads=threads)
    else:
        # 'migrate', 'createsuperuser', 'test', 'seed_demo', ...
        execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
