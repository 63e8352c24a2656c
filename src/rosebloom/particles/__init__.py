from rosebloom.particles.simulator import (
    Bounds,
    FrameLimiter,
    Particle,
    ParticleConfig,
    ParticleMode,
    ParticleSimulator,
    create_particle_pool,
)
