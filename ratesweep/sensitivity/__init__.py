from ratesweep.sensitivity.point_sensitivity import (PointSensitivity,
                                                     PointSensitivities,
                                                     ZeroRateSensitivity,
                                                     IborRateSensitivity,
                                                     OvernightRateSensitivity,
                                                     InflationRateSensitivity)
