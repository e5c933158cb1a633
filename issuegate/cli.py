from issuegate.interface.cli.cli import cli


def main() -> None:
    cli(prog_name="issuegate")


if __name__ == "__main__":
    main()
