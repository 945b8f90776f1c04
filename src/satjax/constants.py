"""
The `constants` module defines the physical constants used by satjax.

Units follow the satellite-pair model: kilometres, kilograms and seconds.
"""

# Physical Constants
"""
Newtonian constant of gravitation expressed in kilometre units. Units: *km^3/(kg s^2)*

References:

1. H. Curtis, *Orbital Mechanics for Engineering Students*, 2005
"""
G_KM = 6.67259e-20  # [km^3/(kg s^2)]

"""
Newtonian constant of gravitation in SI units. Units: *m^3/(kg s^2)*
"""
G_SI = G_KM * 1.0e9  # [m^3/(kg s^2)]

# Reference satellite-pair system
"""
Mass of the central body of the reference satellite-pair system. Units: *kg*
"""
M_CENTRAL_REF = 1.0e29

"""
Mass of the inner satellite of the reference satellite-pair system. Units: *kg*
"""
M_BODY1_REF = 2.0e27

"""
Mass of the outer satellite of the reference satellite-pair system. Units: *kg*
"""
M_BODY2_REF = 1.0e26
