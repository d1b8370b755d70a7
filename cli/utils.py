import functools

import click
from click import ClickException


def standard_error_handler(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)
            return result
        except Exception as e:  # noqa
            ce = ClickException(message=str(e))
            raise ce

    return wrapper


def parse_labels(label) -> dict[str, str]:
    try:
        return dict([_l.split("=", 1) for _l in label])
    except ValueError:
        raise click.BadParameter("Labels must be given as label=value") from None


class AliasedCommand(click.Command):
    def __init__(self, *args, alias=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.alias = alias or []


class AliasedGroup(click.Group):

    command_class = AliasedCommand

    def get_command(self, ctx, cmd_name):
        rv = click.Group.get_command(self, ctx, cmd_name)
        if rv is not None:
            return rv
        for _, cmd in self.commands.items():
            if hasattr(cmd, "alias") and cmd_name in cmd.alias:
                return cmd
        matches = [x for x in self.list_commands(ctx) if x.startswith(cmd_name)]
        if not matches:
            return None
        elif len(matches) == 1:
            return click.Group.get_command(self, ctx, matches[0])
        ctx.fail(f"Too many matches: {', '.join(sorted(matches))}")

    def format_commands(self, ctx, formatter) -> None:
        commands = []
        for subcommand, acmd in sorted(self.commands.items()):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            alias = ",".join(acmd.alias) if getattr(acmd, "alias", None) else None
            commands.append((f"{subcommand} {'('+alias+')' if alias else ''}", cmd))

        if len(commands):
            limit = formatter.width - 6 - max(len(cmd[0]) for cmd in commands)
            rows = [(subcommand, cmd.get_short_help_str(limit)) for subcommand, cmd in commands]
            with formatter.section("Commands"):
                formatter.write_dl(rows)

    def resolve_command(self, ctx, args):
        # always return the full command name
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name, cmd, args
