"""Allow `python -m hello_service`."""

from hello_service.main import main

main()
