"""
Reply text for Status Bot.

Everything the bot says is Zulip markdown built here.
"""

from statusbot.rc.models import Position

ISSUES_URL = "https://github.com/jryio/statusbot/issues/new"
DESK_GUIDE_URL = "https://recurse.notion.site/RC-Together-User-Guide-695cc163c76c47449347bd97a6842c3b"

HELP_TEXT = f"""**How to use Status Bot**:
* `status {{emoji}} {{text}} {{expires_at}}` Set your status
  * `{{emoji}}` (optional) - A unicode emoji (🦀) or a Zulip emoji name (:crab:)
    * Custom emojis are not supported (:sadparrot:)
  * `{{text}}` (optional) - Status message for others to see
    * Cannot contain `<` or `>` characters
  * `{{expires_at}}` (optional) - The expiration time for the status (default 30m)
    * Expiration should be set using zulip's [<time> selector](https://zulip.com/help/global-times)
    * Choose a time in the future!
  * `status :crab: Rewriting Status Bot in Rust <time:2025-01-01T10:00:00-04:00>`
* `show` Display your current status
* `clear` Clear your status
* `set_name {{name}}` Tell Status Bot your Virtual RC name
* `clear_name` Forget the name set with `set_name`
* `feedback {{text}}` Send anonymous feedback to the Status Bot maintainer(s)
* `help` Print help message

Note: Status Bot uses your Zulip username to match your Virtual RC username. If you're having
trouble setting your status you can tell Status Bot what your Virtual RC name is with the
command `set_name {{name}}`

Bug with Status Bot? Please [create an issue]({ISSUES_URL}) on Github
"""

MISSING_DESK = f"""**Unable to find a desk in Virtual RC associated with your username**
* Make sure you have [claimed a desk]({DESK_GUIDE_URL}) in Virtual RC
* If your Zulip username does not match your Virtual RC username... (ignoring the (pronouns) and (batch) parentheticals)
  * Fix username mismatch between Zulip <-> Virtual RC by using command `set_name {{name}}` with Status Bot
  * `set_name {{name}}` Tell Status Bot your Virtual RC username
* If Status Bot still cannot find your desk in Virtual RC, please [create an issue]({ISSUES_URL}) on Github
"""

EMPTY_STATUS = "Your status is empty"

PAST_EXPIRATION = (
    "**That expiration time is in the past**\n"
    "Pick a time in the future with zulip's [<time> selector](https://zulip.com/help/global-times), "
    "or leave it out to expire your status in 30 minutes."
)

FEEDBACK_DISABLED = (
    "Status Bot doesn't have anyone to send feedback to right now. "
    f"Please [create an issue]({ISSUES_URL}) on Github instead."
)

FEEDBACK_SENT = "Thanks for the feedback! It has been passed on to the Status Bot maintainer(s)."

STATUS_CLEARED = "Your status has been cleared"


def status_set(rendered: str) -> str:
    return f"Status set! {rendered}" if rendered else "Status set!"


def current_status(rendered: str) -> str:
    return f"**Your current status**: {rendered}"


def name_set(name: str, desk_found: bool) -> str:
    reply = f"Got it! Status Bot will look for your desk under the Virtual RC name **{name}**"
    if not desk_found:
        reply += (
            f"\n\nStatus Bot couldn't find a desk owned by **{name}** yet. "
            "Check the spelling against your name in Virtual RC."
        )
    return reply


def name_cleared(previous: str | None) -> str:
    if previous is None:
        return "You didn't have a Virtual RC name set, so there was nothing to clear"
    return f"Forgot your Virtual RC name **{previous}**. Status Bot will use your Zulip name again"


def desk_lookup(name: str, desk_id: int | None, pos: Position | None) -> str:
    if desk_id is None or pos is None:
        return f"No desk found for **{name}**"
    return f"Desk for **{name}**: id = {desk_id}, pos = ({pos.x}, {pos.y})"


def sent_home(pos: Position) -> str:
    return f"Status Bot went home to ({pos.x}, {pos.y})"


def failure(action: str, reason: str) -> str:
    """An apologetic error reply for when a remote call fails."""
    return (
        f"**Sorry, Status Bot was unable to {action}**\n"
        f"{reason}\n\n"
        f"If you believe Status Bot is not working, please [create an issue]({ISSUES_URL}) on Github"
    )
