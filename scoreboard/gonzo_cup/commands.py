import click
from flask.cli import with_appcontext

from scoreboard.gonzo_cup import services

@click.group(name='gonzo-cup')
def gonzo_cup_cli():
    """Gonzo Cup tournament commands."""
    pass

@gonzo_cup_cli.command('show-bracket')
@with_appcontext
def show_bracket_command():
    """Print the bracket, round by round."""
    view = services.bracket_state()
    if view['malformed']:
        click.echo("Bracket is malformed. Reset it with DELETE /api/gonzo-cup/bracket and seed it again.")
        return
    if not view['rounds']:
        click.echo("Bracket has not been initialized.")
        return

    for round_view in view['rounds']:
        click.echo(f"{round_view['name']}:")
        for match in round_view['matches']:
            top, bottom = match['top'], match['bottom']
            line = f"  {top['teamName']} vs {bottom['teamName']} [{match['state']}]"
            if match['gameId'] is not None:
                line += f" {match['homeScore']}-{match['awayScore']}"
            if match['scheduledTime']:
                line += f" @ {match['scheduledTime']}"
            click.echo(line)

    if view['champion'] is not None:
        final = view['rounds'][-1]['matches'][0]
        side = final['top'] if final['top']['teamId'] == view['champion'] else final['bottom']
        click.echo(f"Champion: {side['teamName']}")
