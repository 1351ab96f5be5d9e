from ..geometry import FieldOfViewRange, Footprint, SkyRectangle
from ..strategy import SurveyParameters, SurveyStrategy

# WAVES-Wide in the G23 region, Z-band and redshift limited
# https://wavesurvey.org/project/survey-design/
waves_g23 = SurveyStrategy(SurveyParameters(
    name="waves-g23",
    description="WAVES-Wide G23 region, Z <= 21.1, z <= 0.2",
    field_of_view=FieldOfViewRange(dc=(0.0, 900.0), ra=(339.0, 351.0), dec=(-35.0, -30.0)),
    footprint=Footprint((
        SkyRectangle(339.0, 351.0, -35.0, -30.0, name="G23"),
    )),
    min_mass=1e6,
    mag_limit=21.1,
    proxy_margin=2.0,
    z_max=0.2,
))
