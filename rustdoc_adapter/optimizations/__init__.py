"""Index-backed resolution of crate items, impls and methods, with full-scan fallbacks."""