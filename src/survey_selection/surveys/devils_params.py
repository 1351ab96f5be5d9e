from ..geometry import FieldOfViewRange, Footprint, SkyRectangle
from ..strategy import SurveyParameters, SurveyStrategy

# DEVILS deep fields (XMM-LSS, ECDFS, COSMOS), Y-band limited
devils = SurveyStrategy(SurveyParameters(
    name="devils",
    description="DEVILS D02/D03/D10 deep fields, Y <= 21.2",
    field_of_view=FieldOfViewRange(dc=(0.0, 6000.0), ra=(34.0, 150.7), dec=(-28.5, 2.79)),
    footprint=Footprint((
        SkyRectangle(34.0, 37.05, -5.2, -4.2, name="D02"),
        SkyRectangle(52.26, 53.72, -28.5, -27.5, name="D03"),
        SkyRectangle(149.38, 150.7, 1.65, 2.79, name="D10"),
    )),
    min_mass=1e8,
    mag_limit=21.2,
    proxy_margin=3.0,
))
