from ..geometry import FieldOfViewRange, Footprint, SkyRectangle
from ..strategy import SurveyParameters, SurveyStrategy

# GAMA equatorial and G23 fields, r-band limited main survey
# https://www.gama-survey.org/dr4/
gama = SurveyStrategy(SurveyParameters(
    name="gama",
    description="GAMA main survey, G09/G12/G15/G23 fields, r <= 19.8",
    field_of_view=FieldOfViewRange(dc=(0.0, 2450.0), ra=(129.0, 351.0), dec=(-35.0, 3.0)),
    footprint=Footprint((
        SkyRectangle(129.0, 141.0, -2.0, 3.0, name="G09"),
        SkyRectangle(174.0, 186.0, -3.0, 2.0, name="G12"),
        SkyRectangle(211.5, 223.5, -2.0, 3.0, name="G15"),
        SkyRectangle(339.0, 351.0, -35.0, -30.0, name="G23"),
    )),
    min_mass=1e8,
    mag_limit=19.8,
    proxy_margin=2.0,
))
