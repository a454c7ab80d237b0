"""Sweepstake pools: fair horse allocation and prize settlement."""
