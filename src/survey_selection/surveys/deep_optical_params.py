from ..geometry import FieldOfViewRange, Footprint, SkyRectangle
from ..strategy import SurveyParameters, SurveyStrategy

# Generic deep pencil-beam stripe straddling RA = 0
deep_optical = SurveyStrategy(SurveyParameters(
    name="deep-optical",
    description="Deep optical stripe across RA = 0, mag <= 24",
    field_of_view=FieldOfViewRange(dc=(0.0, 4000.0), ra=(330.0, 30.0), dec=(-10.0, 10.0)),
    footprint=Footprint((
        SkyRectangle(330.0, 30.0, -10.0, 10.0, name="stripe"),
    )),
    min_mass=1e7,
    mag_limit=24.0,
    proxy_margin=2.0,
))
