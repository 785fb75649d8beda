from models.county import CountyRecord
from models.resource import ResourceRecord
from models.allocation import Allocation, CountyPriority, ResourceTracker
from models.scenario import Scenario
from models.alert import PredictiveAlert
