import sys

from fhir_definitions import application


def main() -> None:
    sys.exit(application.run())


if __name__ == "__main__":
    main()
