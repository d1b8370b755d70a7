import sys

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style
from tabulate import tabulate

console_style = Style.from_dict(
    {
        "success": "#448844",
        "heading": "bold",
    }
)


def _print(style_class: str, text: str):
    # resolve stdout on every call, it is swapped when commands are invoked in tests
    print_formatted_text(
        FormattedText([(style_class, text)]), style=console_style, file=sys.stdout
    )


def info(text: str):
    _print("class:info", f"{text}")


def success(text: str):
    _print("class:success", f"{text}")


def heading(text: str):
    _print("class:heading", f"{text}")


def table(rows, headers):
    print_formatted_text(tabulate(rows, headers=headers), file=sys.stdout)
