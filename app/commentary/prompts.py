"""
Prompt templates for the commentary collaborator.
"""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.engine.deliveries import DeliveryOutcomeKind

BALL_MAX_OUTPUT_TOKENS = 50


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def ball_prompt(
    shot: int,
    opposing_value: int,
    is_wicket: bool,
    kind: "DeliveryOutcomeKind",
    runs: int,
    is_free_hit: bool,
) -> str:
    return (
        "Act as a live cricket commentator. Generate a short (max 15 words) "
        "exciting commentary for a specific ball.\n"
        "Context:\n"
        f"- Shot chosen by batsman: {shot}\n"
        f"- Bowler's value: {opposing_value}\n"
        f"- Is it a wicket? {_yes_no(is_wicket)}\n"
        f"- Outcome: {kind.value}\n"
        f"- Runs scored: {runs}\n"
        f"- Is it a free hit? {_yes_no(is_free_hit)}\n"
        "Make it sound authentic like Richie Benaud or Harsha Bhogle."
    )


def summary_prompt(
    innings1_runs: int,
    innings1_wickets: int,
    innings2_runs: int,
    innings2_wickets: int,
    winner_label: str,
) -> str:
    return (
        "Summarize a cricket match result in 20 words.\n"
        "Final Scores:\n"
        f"First innings: {innings1_runs}/{innings1_wickets}\n"
        f"Second innings: {innings2_runs}/{innings2_wickets}\n"
        f"Winner: {winner_label}\n"
        "Make it punchy."
    )
