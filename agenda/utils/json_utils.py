import json
from datetime import date, datetime, time
from decimal import Decimal

class AgendaJSONEncoder(json.JSONEncoder):
    """
    Custom JSON encoder for audit details
    Money values become floats, dates and times ISO strings
    """
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, (datetime, date, time)):
            return obj.isoformat()
        return super(AgendaJSONEncoder, self).default(obj)
