"""
Constants
=========

Physical constants, harmonics tables and the default initial state of the
DE118 ephemeris at JD 2440400.5 (1969-06-28 00:00:00 TDB).

Units: astronomical units [au], days [d], radians [rad].
"""


class CONVERTER:
  # Angle Conversions
  RAD_PER_DEG = 3.141592653589793 / 180.0  # [radian] per [degree]
  DEG_PER_RAD = 180.0 / 3.141592653589793  # [degree] per [radian]

  # Time Conversions
  SEC_PER_DAY     = 86400.0                # [seconds] per [day]
  DAY_PER_YEAR    = 365.25                 # [days] per [Julian year]
  DAY_PER_CENTURY = 36525.0                # [days] per [Julian century]

  # Distance Conversions
  KM_PER_AU = 149597870.66                 # [kilometers] per [astronomical unit] (DE118)
  AU_PER_KM = 1.0 / KM_PER_AU              # [astronomical units] per [kilometer]


class PHYSICALCONSTANTS:
  speed_of_light = 173.144632720536344565  # Speed of light in vacuum [au/d]
  GAUSS_K        = 0.01720209895           # Gaussian gravitational constant [au^(3/2)/d]
  JD_J2000       = 2451545.0               # Julian date of the J2000 epoch [d]


class DE118:
  """
  Mass ratios integrated with the DE118 initial state (Sun mass divided by
  body mass, the Earth-Moon barycenter treated as one body) and the Earth-Moon
  mass ratio. The planetary ratios are the DE405 values.
  """
  GP_SUN = PHYSICALCONSTANTS.GAUSS_K ** 2  # Sun's gravitational parameter [au³/d²]

  SUN_PER_MERCURY = 6023600.0
  SUN_PER_VENUS   = 408523.71
  SUN_PER_EMB     = 328900.56
  SUN_PER_MARS    = 3098708.0
  SUN_PER_JUPITER = 1047.3486
  SUN_PER_SATURN  = 3497.898
  SUN_PER_URANUS  = 22902.98
  SUN_PER_NEPTUNE = 19412.24
  SUN_PER_PLUTO   = 135200000.0

  EMRAT  = 81.300587                        # Earth mass per Moon mass
  GP_EMB = GP_SUN / SUN_PER_EMB             # Earth-Moon barycenter gravitational parameter [au³/d²]


class SOLARSYSTEMCONSTANTS:
  """
  Gravitational parameters, radii and figure parameters of the integrated
  bodies.
  """

  class SUN:
    GP = DE118.GP_SUN                                   # [au³/d²]

  class MERCURY:
    GP = DE118.GP_SUN / DE118.SUN_PER_MERCURY           # [au³/d²]

  class VENUS:
    GP = DE118.GP_SUN / DE118.SUN_PER_VENUS             # [au³/d²]

  class EARTH:
    class RADIUS:
      EQUATOR = 6378.14 * CONVERTER.AU_PER_KM           # Earth's equatorial radius [au]

    GP = DE118.GP_EMB * DE118.EMRAT / (1.0 + DE118.EMRAT)  # [au³/d²]

    # Zonal harmonics J2, J3, J4 (unnormalized)
    J2 =  1.08263e-3
    J3 = -0.254e-5
    J4 = -0.161e-5

    # Tides
    LOVE_NUMBER = 0.30                                  # Love number k2
    TIDAL_LAG   = 0.0410                                # Tidal phase lag [rad]

  class MOON:
    class RADIUS:
      EQUATOR = 1738.0 * CONVERTER.AU_PER_KM            # Moon's equatorial radius [au]

    GP = DE118.GP_EMB / (1.0 + DE118.EMRAT)             # [au³/d²]

    # Zonal harmonics J2, J3 (unnormalized)
    J2 = 2.0321568464952570e-4
    J3 = 8.4597026974594570e-6

    # Tesseral harmonics as (n, m, C_nm, S_nm) rows (unnormalized)
    CS_NM = (
      (2, 2, 2.2303513090618750e-5,  0.0                  ),
      (3, 1, 2.8480741195592860e-5,  5.8915551555318640e-6),
      (3, 2, 4.8449420619770600e-6,  1.6844743962783900e-6),
      (3, 3, 1.6756178134114570e-6, -2.4742714379805760e-7),
    )

    # Principal moments of inertia
    BETA     = 6.316867734684e-4                        # (C - A) / B
    GAMMA    = 2.280221835845e-4                        # (B - A) / C
    MOMENT_C = 0.390689525894717                        # C / (M R²)

  class MARS:
    GP = DE118.GP_SUN / DE118.SUN_PER_MARS              # [au³/d²]

  class JUPITER:
    GP = DE118.GP_SUN / DE118.SUN_PER_JUPITER           # [au³/d²]

  class SATURN:
    GP = DE118.GP_SUN / DE118.SUN_PER_SATURN            # [au³/d²]

  class URANUS:
    GP = DE118.GP_SUN / DE118.SUN_PER_URANUS            # [au³/d²]

  class NEPTUNE:
    GP = DE118.GP_SUN / DE118.SUN_PER_NEPTUNE           # [au³/d²]

  class PLUTO:
    GP = DE118.GP_SUN / DE118.SUN_PER_PLUTO             # [au³/d²]


class INITIALSTATE:
  """
  DE118 initial conditions, J2000 equator [au, au/d].

  The Sun is barycentric. The planets and the Earth-Moon barycenter (EMB) are
  heliocentric and are shifted by the Sun state when the default state is
  built. The geocentric Moon is split from the EMB with the Earth-Moon mass
  ratio.
  """
  JD_EPOCH = 2440400.5

  # Body order of the degrees-of-freedom vector
  BODY_NAMES = (
    'Sun', 'Mercury', 'Venus', 'Earth', 'Moon', 'Mars',
    'Jupiter', 'Saturn', 'Uranus', 'Neptune', 'Pluto',
  )

  SUN = (
    ( 0.0045025081562339,  0.0007670747009830,  0.0002660568051805),
    (-0.0000003517482096,  0.0000051776264248,  0.0000022291018812),
  )
  MERCURY = (
    ( 0.3572602064472754, -0.0915490424305184, -0.0859810319469045),
    ( 0.0033678456621955,  0.0248893428422460,  0.0129440761127703),
  )
  VENUS = (
    ( 0.6082494331856039, -0.3491324431959005, -0.1955443457854069),
    ( 0.0109524201099088,  0.0156125067398625,  0.0063288764517467),
  )
  EMB = (
    ( 0.1160149091391665, -0.9266055536403126, -0.4018062776069644),
    ( 0.0168116200522023,  0.0017431316879820,  0.0007559737671361),
  )
  MOON_GEOCENTRIC = (
    (-0.0008081773279115, -0.0019946300016204, -0.0010872626608381),
    ( 0.0006010848166591, -0.0001674454606318, -0.0000855621449740),
  )
  MARS = (
    (-0.1146885824741435, -1.3283665022830844, -0.6061551848064419),
    ( 0.0144820048248171,  0.0002372854180049, -0.0002837498255219),
  )
  # Jupiter to Pluto are integrated back from the JD 2476925.5 state
  JUPITER = (
    ( -5.3842092623446334,  -0.8312483471413777, -0.2250951023079180),
    (  0.0010923644261354,  -0.0065232941084569, -0.0028230121369339),
  )
  SATURN = (
    (  7.8898882327079116,   4.5957109484536218,  1.5584297737213266),
    ( -0.0032172047142846,   0.0043306327489833,  0.0019264172246372),
  )
  URANUS = (
    (-18.2699060511567737,  -1.1627235738634194, -0.2503714117171503),
    (  0.0002215424683580,  -0.0037676524015293, -0.0016532440463930),
  )
  NEPTUNE = (
    (-16.0595401617468418, -23.9429591879036607, -9.4004233733652214),
    (  0.0026431218173726,  -0.0015034900276183, -0.0006812710927860),
  )
  PLUTO = (
    (-30.4878155100939132,  -0.8731761657377360,  8.9113053864205032),
    (  0.0003225591419948,  -0.0031487537484627, -0.0010801786767992),
  )

  # Lunar libration angles [rad] and rates [rad/d]
  LIBRATION = {
    'phi'       : 0.005128132058714,
    'phi_dot'   : 1.165507165777481e-04,
    'theta'     : 0.382393200523007,
    'theta_dot' : 1.461912823858170e-05,
    'psi'       : 1.294168056057082,
    'psi_dot'   : 0.229836728242082,
  }
