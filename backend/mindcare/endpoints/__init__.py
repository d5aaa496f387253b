# mindcare/endpoints/__init__.py

# Import routers from each endpoint file
from .appointments import router as appointments
from .alerts import router as alerts
from .slots import router as slots
from .dashboard import router as dashboard
from .doctors import router as doctors
from .patients import router as patients
from .mood import router as mood
from .messages import router as messages
from .chat import router as chat

__all__ = ["appointments", "alerts", "slots", "dashboard", "doctors", "patients", "mood", "messages", "chat"]
