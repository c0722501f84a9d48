from app.engine.match_engine import MatchEngine, MatchConfig
from app.engine.deliveries import DeliveryGenerator
from app.engine.innings import Innings, Team

__all__ = ["MatchEngine", "MatchConfig", "DeliveryGenerator", "Innings", "Team"]
