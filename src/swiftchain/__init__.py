"""SwiftChain: INR to crypto transfer quotes, fee comparison and simulated settlement."""

__version__ = "0.1.0"
