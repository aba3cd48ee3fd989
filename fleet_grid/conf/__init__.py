"""Settings modules shipped with fleet-grid."""
