import uuid
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.commentary.service import CommentaryService
from app.engine.errors import BallInFlightError, InvalidShotError, MatchError
from app.engine.innings import BallRecord, Innings
from app.engine.match_engine import Decision, MatchEngine, Stage, TossCall
from app.api.schemas import (
    BallRecordResponse, BallRequest, BallResultResponse, DecisionRequest,
    InningsResponse, MatchResultResponse, MatchStateResponse, TossRequest,
    TossResultResponse,
)

router = APIRouter(prefix="/match", tags=["Hand Cricket Match"])

# In-memory store for active matches, keyed by match id
active_matches: Dict[str, MatchEngine] = {}


def create_engine() -> MatchEngine:
    return MatchEngine(commentary=CommentaryService.from_settings())


def get_engine(match_id: str) -> MatchEngine:
    engine = active_matches.get(match_id)
    if engine is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return engine


def _raise_for(error: MatchError):
    if isinstance(error, InvalidShotError):
        raise HTTPException(status_code=422, detail=str(error))
    raise HTTPException(status_code=409, detail=str(error))


def _record_response(record: BallRecord) -> BallRecordResponse:
    return BallRecordResponse(
        over=record.over,
        ball_number=record.ball_number,
        display=record.display,
        runs=record.runs,
        is_wicket=record.is_wicket,
        outcome_type=record.outcome_kind.value,
        outcome=record.outcome_string,
        commentary=record.commentary,
        shot=record.shot,
    )


def _innings_response(innings: Optional[Innings]) -> Optional[InningsResponse]:
    if innings is None:
        return None
    return InningsResponse(
        batting_team=innings.batting_team.value,
        bowling_team=innings.bowling_team.value,
        runs=innings.total_runs,
        wickets=innings.wickets,
        overs=innings.overs_display,
        balls_bowled=innings.balls_bowled,
        balls_remaining=innings.balls_remaining,
        run_rate=round(innings.run_rate, 2),
        extras=innings.extras,
        target=innings.target,
        runs_required=innings.runs_required,
        required_rate=round(innings.required_rate, 2) if innings.required_rate is not None else None,
        on_strike_index=innings.on_strike_index,
        is_complete=innings.is_complete,
        history=[_record_response(b) for b in innings.history],
    )


def _get_match_state_response(match_id: str, engine: MatchEngine) -> MatchStateResponse:
    state = engine.state

    current_innings = None
    if state.stage == Stage.INNINGS1:
        current_innings = 1
    elif state.stage == Stage.INNINGS2:
        current_innings = 2

    result = None
    if engine.result:
        r = engine.result
        result = MatchResultResponse(
            winner_name=r.winner_label,
            is_tie=r.is_tie,
            margin=r.margin,
            innings1_score=f"{r.innings1_runs}/{r.innings1_wickets}",
            innings2_score=f"{r.innings2_runs}/{r.innings2_wickets}",
            summary=r.summary,
        )

    return MatchStateResponse(
        match_id=match_id,
        stage=state.stage.value,
        toss_winner=state.toss_winner.value if state.toss_winner else None,
        user_decision=state.user_decision.value if state.user_decision else None,
        innings1=_innings_response(state.innings1),
        innings2=_innings_response(state.innings2),
        current_innings=current_innings,
        is_user_batting=engine.is_user_batting,
        is_free_hit=engine.is_free_hit,
        is_processing=engine.is_processing,
        target=engine.target,
        commentary=engine.commentary_line,
        last_ball_summary=engine.last_ball_summary,
        result=result,
    )


@router.post("")
async def create_match():
    """Create a new match waiting for the toss"""
    match_id = uuid.uuid4().hex
    engine = create_engine()
    active_matches[match_id] = engine
    return _get_match_state_response(match_id, engine)


@router.get("/{match_id}/state")
async def get_match_state(match_id: str, engine: MatchEngine = Depends(get_engine)):
    return _get_match_state_response(match_id, engine)


@router.post("/{match_id}/toss")
async def do_toss(match_id: str, request: TossRequest, engine: MatchEngine = Depends(get_engine)):
    """Perform toss against the user's call"""
    try:
        toss = engine.toss(TossCall(request.call.value))
    except MatchError as e:
        _raise_for(e)

    return TossResultResponse(
        call=toss.call.value,
        coin=toss.coin.value,
        toss_winner_name=toss.winner.value,
        user_won_toss=toss.user_won,
        computer_decision=toss.computer_decision.value if toss.computer_decision else None,
        match_state=_get_match_state_response(match_id, engine),
    )


@router.post("/{match_id}/decision")
async def choose_decision(match_id: str, request: DecisionRequest, engine: MatchEngine = Depends(get_engine)):
    """Bat or bowl after the user wins the toss"""
    try:
        engine.choose(Decision(request.decision.value))
    except MatchError as e:
        _raise_for(e)
    return _get_match_state_response(match_id, engine)


@router.post("/{match_id}/ball")
async def play_ball(match_id: str, request: BallRequest, engine: MatchEngine = Depends(get_engine)):
    try:
        outcome = await engine.play_ball(request.shot)
    except BallInFlightError as e:
        raise HTTPException(status_code=429, detail=str(e))
    except MatchError as e:
        _raise_for(e)

    return BallResultResponse(
        outcome=outcome.record.outcome_string,
        outcome_type=outcome.ball.kind.value,
        runs=outcome.ball.runs,
        is_wicket=outcome.ball.is_wicket,
        was_free_hit=outcome.ball.was_free_hit,
        opposing_value=outcome.ball.opposing_value,
        commentary=outcome.record.commentary,
        innings_complete=outcome.innings.is_complete,
        match_state=_get_match_state_response(match_id, engine),
    )


@router.post("/{match_id}/second-innings")
async def start_second_innings(match_id: str, engine: MatchEngine = Depends(get_engine)):
    try:
        engine.start_second_innings()
    except MatchError as e:
        _raise_for(e)
    return _get_match_state_response(match_id, engine)


@router.post("/{match_id}/reset")
async def reset_match(match_id: str, engine: MatchEngine = Depends(get_engine)):
    """Play again: back to the toss"""
    engine.reset()
    return _get_match_state_response(match_id, engine)


@router.delete("/{match_id}")
async def delete_match(match_id: str, engine: MatchEngine = Depends(get_engine)):
    engine.reset()
    del active_matches[match_id]
    return {"status": "deleted"}
