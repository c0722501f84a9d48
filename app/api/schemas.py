"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel
from typing import List, Optional
from enum import Enum


# Enums
class TossCallEnum(str, Enum):
    HEADS = "Heads"
    TAILS = "Tails"


class DecisionEnum(str, Enum):
    BAT = "Bat"
    BOWL = "Bowl"


# Requests
class TossRequest(BaseModel):
    call: TossCallEnum


class DecisionRequest(BaseModel):
    decision: DecisionEnum


class BallRequest(BaseModel):
    shot: int  # 0, 1, 2, 3, 4 or 6


# Responses
class BallRecordResponse(BaseModel):
    over: int
    ball_number: int
    display: str
    runs: int
    is_wicket: bool
    outcome_type: str
    outcome: str  # W, Wd, Nb or runs
    commentary: str
    shot: Optional[int] = None


class InningsResponse(BaseModel):
    batting_team: str
    bowling_team: str
    runs: int
    wickets: int
    overs: str
    balls_bowled: int
    balls_remaining: int
    run_rate: float
    extras: int
    target: Optional[int] = None
    runs_required: Optional[int] = None
    required_rate: Optional[float] = None
    on_strike_index: int
    is_complete: bool
    history: List[BallRecordResponse] = []


class MatchResultResponse(BaseModel):
    winner_name: str
    is_tie: bool
    margin: str
    innings1_score: str
    innings2_score: str
    summary: str


class MatchStateResponse(BaseModel):
    match_id: str
    stage: str
    toss_winner: Optional[str] = None
    user_decision: Optional[str] = None
    innings1: Optional[InningsResponse] = None
    innings2: Optional[InningsResponse] = None
    current_innings: Optional[int] = None
    is_user_batting: bool = False
    is_free_hit: bool = False
    is_processing: bool = False
    target: Optional[int] = None
    commentary: str
    last_ball_summary: str = ""
    result: Optional[MatchResultResponse] = None


class TossResultResponse(BaseModel):
    call: str
    coin: str
    toss_winner_name: str
    user_won_toss: bool
    computer_decision: Optional[str] = None
    match_state: MatchStateResponse


class BallResultResponse(BaseModel):
    outcome: str
    outcome_type: str
    runs: int
    is_wicket: bool
    was_free_hit: bool
    opposing_value: int
    commentary: str
    innings_complete: bool
    match_state: MatchStateResponse
